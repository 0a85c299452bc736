# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests table definitions, constraints and indexes.
"""

from src.infrastructure.database.models.academic import Course, Enrollment, Grade, Student
from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin


class TestBase:
    """Test base model functionality."""

    def test_base_inherits_declarative_base(self):
        """Verify Base is a declarative base."""
        assert hasattr(Base, "metadata")
        assert hasattr(Base, "registry")

    def test_timestamp_mixin_has_created_at(self):
        """Verify TimestampMixin has created_at field."""
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")

    def test_uuid_mixin_has_id(self):
        """Verify UUIDMixin has id field."""
        assert hasattr(UUIDMixin, "id")

    def test_all_tables_registered(self):
        """Verify every table is on the shared metadata."""
        assert set(Base.metadata.tables) == {"students", "courses", "enrollments", "grades"}


class TestStudentModel:
    """Test Student model."""

    def test_student_model_exists(self):
        """Verify Student model has required attributes."""
        assert Student.__tablename__ == "students"
        assert hasattr(Student, "student_id")
        assert hasattr(Student, "semester")
        assert hasattr(Student, "current_credit_hours")
        assert hasattr(Student, "max_credit_hours")

    def test_credit_hours_cannot_go_negative(self):
        """Verify the balance has a non-negative check."""
        names = {c.name for c in Student.__table__.constraints}
        assert "ck_students_credit_hours_non_negative" in names

    def test_repr(self):
        """Test Student repr."""
        student = Student(student_id="S1", semester=2)
        assert repr(student) == "<Student(student_id=S1, semester=2)>"


class TestCourseModel:
    """Test Course model."""

    def test_course_model_exists(self):
        """Verify Course model has required attributes."""
        assert Course.__tablename__ == "courses"
        assert hasattr(Course, "code")
        assert hasattr(Course, "credit_hours")


class TestEnrollmentModel:
    """Test Enrollment model."""

    def test_enrollment_model_exists(self):
        """Verify Enrollment model has required attributes."""
        assert Enrollment.__tablename__ == "enrollments"
        assert hasattr(Enrollment, "id")
        assert hasattr(Enrollment, "student_id")
        assert hasattr(Enrollment, "course_code")
        assert hasattr(Enrollment, "status")

    def test_pair_index_is_not_unique(self):
        """Verify duplicate records for a pair can be stored."""
        indexes = {i.name: i for i in Enrollment.__table__.indexes}
        index = indexes["ix_enrollments_student_course"]

        assert index.unique is False
        assert [c.name for c in index.columns] == ["student_id", "course_code"]


class TestGradeModel:
    """Test Grade model."""

    def test_grade_model_exists(self):
        """Verify Grade model has required attributes."""
        assert Grade.__tablename__ == "grades"
        assert hasattr(Grade, "marks")

    def test_one_grade_per_pair(self):
        """Verify the unique constraint on (student_id, course_code)."""
        names = {c.name for c in Grade.__table__.constraints}
        assert "uq_grades_student_course" in names
