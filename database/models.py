"""
SQLAlchemy ORM models for the student records schema.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
    # Stored normalized (stripped, lower-cased); the unique constraint is the
    # only guard against duplicate registrations.
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    schedule = relationship("ScheduleEntry", back_populates="student", cascade="all, delete-orphan")


class ScheduleEntry(Base):
    __tablename__ = "schedule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    course_name = Column(String(255), nullable=False)
    course_time = Column(String(64), nullable=False)

    student = relationship("Student", back_populates="schedule")

    __table_args__ = (Index("ix_schedule_student_id", "student_id"),)
