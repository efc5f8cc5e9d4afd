"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('ADMIN', 'TEACHER', 'STUDENT', 'PARENT', name='user_role')
attendance_status = sa.Enum('PRESENT', 'ABSENT', 'LATE', 'EXCUSED', name='attendance_status')
weekday = sa.Enum('MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY', 'SUNDAY', name='weekday')
notification_type = sa.Enum(
    'GENERAL', 'PARENT_ASSIGNED', 'CLASS_ASSIGNED', 'ENROLLMENT', 'ATTENDANCE', 'GRADE',
    name='notification_type'
)


def _base_columns():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def _index_base(table: str) -> None:
    op.create_index(f'ix_{table}_id', table, ['id'])
    op.create_index(f'ix_{table}_created_at', table, ['created_at'])


def upgrade() -> None:
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('role', user_role, nullable=False),
    )
    _index_base('users')
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_full_name', 'users', ['full_name'])
    op.create_index('ix_users_role', 'users', ['role'])

    for table in ('teachers', 'parents'):
        op.create_table(
            table,
            *_base_columns(),
            sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        )
        _index_base(table)

    op.create_table(
        'classes',
        *_base_columns(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('level', sa.String(50), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), sa.ForeignKey('teachers.id', ondelete='SET NULL'), nullable=True),
    )
    _index_base('classes')
    op.create_index('ix_classes_name', 'classes', ['name'])
    op.create_index('ix_classes_teacher_id', 'classes', ['teacher_id'])

    op.create_table(
        'students',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('class_id', sa.Uuid(), sa.ForeignKey('classes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('parents.id', ondelete='SET NULL'), nullable=True),
    )
    _index_base('students')
    op.create_index('ix_students_class_id', 'students', ['class_id'])
    op.create_index('ix_students_parent_id', 'students', ['parent_id'])

    op.create_table(
        'subjects',
        *_base_columns(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('class_id', sa.Uuid(), sa.ForeignKey('classes.id', ondelete='SET NULL'), nullable=True),
    )
    _index_base('subjects')
    op.create_index('ix_subjects_code', 'subjects', ['code'])
    op.create_index('ix_subjects_class_id', 'subjects', ['class_id'])

    op.create_table(
        'enrollments',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('class_id', sa.Uuid(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('student_id', 'class_id', name='uq_enrollment_student_class'),
    )
    _index_base('enrollments')
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'])
    op.create_index('ix_enrollments_class_id', 'enrollments', ['class_id'])

    op.create_table(
        'attendance',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('class_id', sa.Uuid(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', attendance_status, nullable=False),
    )
    _index_base('attendance')
    op.create_index('ix_attendance_student_id', 'attendance', ['student_id'])
    op.create_index('ix_attendance_class_id', 'attendance', ['class_id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])
    op.create_index('ix_attendance_student_date', 'attendance', ['student_id', 'date'])

    op.create_table(
        'exams',
        *_base_columns(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('class_id', sa.Uuid(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_id', sa.Uuid(), sa.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), sa.ForeignKey('teachers.id', ondelete='CASCADE'), nullable=False),
    )
    _index_base('exams')
    op.create_index('ix_exams_date', 'exams', ['date'])
    op.create_index('ix_exams_class_id', 'exams', ['class_id'])
    op.create_index('ix_exams_subject_id', 'exams', ['subject_id'])
    op.create_index('ix_exams_teacher_id', 'exams', ['teacher_id'])

    op.create_table(
        'grades',
        *_base_columns(),
        sa.Column('exam_id', sa.Uuid(), sa.ForeignKey('exams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_id', sa.Uuid(), sa.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('marks', sa.Integer(), nullable=False),
        sa.UniqueConstraint('student_id', 'exam_id', 'subject_id', name='uq_grade_student_exam_subject'),
    )
    _index_base('grades')
    op.create_index('ix_grades_exam_id', 'grades', ['exam_id'])
    op.create_index('ix_grades_student_id', 'grades', ['student_id'])
    op.create_index('ix_grades_subject_id', 'grades', ['subject_id'])

    op.create_table(
        'timetable',
        *_base_columns(),
        sa.Column('class_id', sa.Uuid(), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_id', sa.Uuid(), sa.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), sa.ForeignKey('teachers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day', weekday, nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
    )
    _index_base('timetable')
    op.create_index('ix_timetable_class_id', 'timetable', ['class_id'])
    op.create_index('ix_timetable_teacher_id', 'timetable', ['teacher_id'])

    op.create_table(
        'notifications',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    _index_base('notifications')
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_read', 'notifications', ['read'])


def downgrade() -> None:
    for table in (
        'notifications', 'timetable', 'grades', 'exams', 'attendance',
        'enrollments', 'subjects', 'students', 'classes', 'parents', 'teachers', 'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (notification_type, weekday, attendance_status, user_role):
        enum_type.drop(bind, checkfirst=True)
