"""Authentication, user administration and interactive sessions."""
