"""Centralized Enum Definitions"""

import enum


class Role(str, enum.Enum):
    """Roles a single account may hold simultaneously"""
    STUDENT = "student"
    LECTURER = "lecturer"
    ADMIN = "admin"


# Default-role priority when the stored role is missing or no longer held
ROLE_PRIORITY = (Role.ADMIN, Role.LECTURER, Role.STUDENT)


class Theme(str, enum.Enum):
    """Display theme"""
    LIGHT = "light"
    DARK = "dark"


class Collection(str, enum.Enum):
    """Record collections exposed through the entity accessor"""
    USERS = "users"
    STUDENTS = "students"
    LECTURERS = "lecturers"
    COURSES = "courses"
    FILES = "files"
    MESSAGES = "messages"
    NOTIFICATIONS = "notifications"
    ACADEMIC_TRACKS = "academic_tracks"


# Collections whose records are linked to a user by e-mail
ROLE_PROFILE_COLLECTIONS = {
    Role.STUDENT: Collection.STUDENTS,
    Role.LECTURER: Collection.LECTURERS,
}


class ProfileStatus(str, enum.Enum):
    """Role profile status"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
