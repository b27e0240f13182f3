# /app/db/models/school_models.py

"""
SQLAlchemy ORM models for the school tables the reports read from.

Foreign keys on grade and attendance rows are nullable with `SET NULL` on
delete: a grade outlives a deleted student or subject, and the reporting
engine is expected to cope with the missing join.
"""

from sqlalchemy import Column, String, Integer, Float, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class AcademicYear(Base):
    __tablename__ = "academic_years"

    id = Column(String, primary_key=True, index=True)
    year = Column(String, nullable=False)
    semester = Column(String, nullable=False)


class Major(Base):
    """A study programme ("jurusan") a class belongs to."""
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)


class Teacher(Base):
    id = Column(String, primary_key=True, index=True)
    nip = Column(String, unique=True, index=True, nullable=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    specialization = Column(String, nullable=True)

    schedules = relationship("Schedule", back_populates="teacher")
    assignments = relationship("Assignment", back_populates="teacher")


class Class(Base):
    __tablename__ = "classes"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    grade_level = Column(Integer, nullable=True)
    major_id = Column(String, ForeignKey("majors.id", ondelete="SET NULL"), nullable=True)
    homeroom_teacher_id = Column(String, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True)
    academic_year_id = Column(String, ForeignKey("academic_years.id", ondelete="SET NULL"), nullable=True, index=True)

    major = relationship("Major")
    homeroom_teacher = relationship("Teacher")
    students = relationship("Student", back_populates="class_")
    schedules = relationship("Schedule", back_populates="class_")


class Student(Base):
    id = Column(String, primary_key=True, index=True)
    nis = Column(String, unique=True, index=True, nullable=True)
    full_name = Column(String, nullable=False)
    class_id = Column(String, ForeignKey("classes.id", ondelete="SET NULL"), nullable=True, index=True)

    class_ = relationship("Class", back_populates="students")
    grades = relationship("Grade", back_populates="student")
    attendance = relationship("Attendance", back_populates="student")


class Subject(Base):
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)


class Schedule(Base):
    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id", ondelete="SET NULL"), nullable=True)
    subject_id = Column(String, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)
    teacher_id = Column(String, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True)
    day_of_week = Column(String, nullable=True)
    start_time = Column(String, nullable=True)

    class_ = relationship("Class", back_populates="schedules")
    subject = relationship("Subject")
    teacher = relationship("Teacher", back_populates="schedules")


class Grade(Base):
    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("students.id", ondelete="SET NULL"), nullable=True, index=True)
    subject_id = Column(String, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True)
    teacher_id = Column(String, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True)
    academic_year_id = Column(String, ForeignKey("academic_years.id", ondelete="SET NULL"), nullable=True, index=True)
    grade_type = Column(String, nullable=False)
    score = Column(Float, nullable=False)
    date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("Student", back_populates="grades")
    subject = relationship("Subject")
    teacher = relationship("Teacher")
    academic_year = relationship("AcademicYear")


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("students.id", ondelete="SET NULL"), nullable=True, index=True)
    schedule_id = Column(String, ForeignKey("schedules.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False)
    notes = Column(Text, nullable=True)

    student = relationship("Student", back_populates="attendance")
    schedule = relationship("Schedule")


class Assignment(Base):
    id = Column(String, primary_key=True, index=True)
    teacher_id = Column(String, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)

    teacher = relationship("Teacher", back_populates="assignments")
    submissions = relationship("AssignmentSubmission", back_populates="assignment", cascade="all, delete-orphan")


class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"

    id = Column(String, primary_key=True, index=True)
    assignment_id = Column(String, ForeignKey("assignments.id"), nullable=False)
    student_id = Column(String, ForeignKey("students.id", ondelete="SET NULL"), nullable=True)

    assignment = relationship("Assignment", back_populates="submissions")
