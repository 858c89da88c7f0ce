"""Provides forms for consumer registration, activation, reset and access."""

from wtforms import Form, StringField
from wtforms.validators import DataRequired, Length, Regexp

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'


def _email() -> StringField:
    return StringField('Email', validators=[
        DataRequired(),
        Length(max=255),
        Regexp(EMAIL_PATTERN, message='Not a valid email address.')
    ])


def _token(label: str) -> StringField:
    return StringField(label, validators=[DataRequired(), Length(max=255)])


class RegistrationForm(Form):
    """Register a new API consumer."""

    email = _email()


class ActivationForm(Form):
    """Submit a valid token for activation."""

    api_token = _token('API token')


class ReactivationForm(Form):
    """Ask for the activation token to be sent again."""

    email = _email()


class ResetKeyForm(Form):
    """Request a reset key."""

    email = _email()


class RefreshTokenForm(Form):
    """Exchange a reset key for a new token."""

    email = _email()
    reset_key = _token('Reset key')


class UpdateForm(Form):
    """Update consumer details."""

    email = _email()


class AccessForm(Form):
    """Log in to the web app with an active token."""

    api_token = _token('API token')


def form_errors(form: Form) -> str:
    """Flatten the validation errors of ``form`` into one message."""
    return '; '.join(f'{form[name].label.text}: {", ".join(errors)}'
                     for name, errors in form.errors.items())
