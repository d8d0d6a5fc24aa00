"""
User Schema Unit Tests
"""

import pytest
from pydantic import ValidationError

from app.schemas.user import PasswordChange, PasswordReset, UserCreate


class TestPasswordLength:
    """Passwords must fit in bcrypt's 72 byte limit."""

    def test_72_bytes_is_accepted(self):
        user = UserCreate(full_name="Siti Rahma", email="siti@edulearn.io", password="a" * 72)

        assert len(user.password) == 72

    def test_longer_password_is_rejected(self):
        with pytest.raises(ValidationError):
            UserCreate(full_name="Siti Rahma", email="siti@edulearn.io", password="a" * 80)

    def test_multibyte_characters_count_as_bytes(self):
        # 40 characters, 80 bytes
        with pytest.raises(ValidationError):
            PasswordReset(new_password="é" * 40)

    def test_password_change_checks_new_password(self):
        with pytest.raises(ValidationError):
            PasswordChange(current_password="old-password", new_password="x" * 73)

        change = PasswordChange(current_password="y" * 100, new_password="new-password")
        assert change.new_password == "new-password"
