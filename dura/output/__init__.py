from dura.output.writer import NoteWriter, render_note

__all__ = ["NoteWriter", "render_note"]
