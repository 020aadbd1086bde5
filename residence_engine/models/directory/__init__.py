from residence_engine.models.directory.student import Staff, Student

__all__ = ["Staff", "Student"]
