"""
JSON request forms
Every write endpoint validates its body through one of these Flask-WTF forms.

The API is token authenticated, so the forms run without CSRF tokens and are
fed from the JSON body instead of request.form: values are converted to the
strings a browser would have posted, and null values are treated as absent.
"""

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import StringField, TextAreaField, IntegerField, DecimalField, DateField
from wtforms.validators import DataRequired, Length, Optional, AnyOf, Email, NumberRange
from assetsup.data.core.asset_info.asset_enums import AssetStatus, AssetCondition, MaintenanceType


class FormValidationError(Exception):
    """Raised when a request body fails form validation"""

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message)
        self.errors = errors
        self.message = message


def json_formdata(payload):
    """Flatten a JSON object into form data (None dropped, scalars stringified)"""
    items = []
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        items.append((key, value if isinstance(value, str) else str(value)))
    return ImmutableMultiDict(items)


class ApiForm(FlaskForm):
    class Meta:
        csrf = False

    @classmethod
    def from_json(cls, payload=None):
        """
        Build and validate a form from the request's JSON body.

        Raises:
            FormValidationError: body is not a JSON object or a field is invalid
        """
        if payload is None:
            payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise FormValidationError({}, "Request body must be a JSON object")

        form = cls(formdata=json_formdata(payload))
        form.payload = payload
        if not form.validate():
            raise FormValidationError(form.errors)
        return form

    def cleaned_data(self, partial=False):
        """
        Validated values keyed by field name.

        Blank strings become None. With partial=True only the keys the client
        actually sent are returned, so PATCH bodies leave other columns alone.
        """
        data = {}
        for name, field in self._fields.items():
            if partial and name not in self.payload:
                continue
            value = field.data
            if isinstance(value, str):
                value = value.strip() or None
            data[name] = value
        return data


# ---------------------------------------------------------------- auth

class RegisterForm(ApiForm):
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    password = StringField('Password', validators=[DataRequired(), Length(min=8, max=128)])
    first_name = StringField('First name', validators=[DataRequired(), Length(max=100)])
    last_name = StringField('Last name', validators=[DataRequired(), Length(max=100)])


class LoginForm(ApiForm):
    email = StringField('Email', validators=[DataRequired()])
    password = StringField('Password', validators=[DataRequired()])


# ------------------------------------------------------- reference data

class CategoryForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])


class DepartmentForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])


# --------------------------------------------------------------- assets

class AssetUpdateForm(ApiForm):
    """Every asset field optional; used for PATCH"""
    name = StringField('Name', validators=[Optional(), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    serial_number = StringField('Serial number', validators=[Optional(), Length(max=100)])
    condition = StringField('Condition', validators=[Optional(), AnyOf(AssetCondition.values())])
    location = StringField('Location', validators=[Optional(), Length(max=200)])
    manufacturer = StringField('Manufacturer', validators=[Optional(), Length(max=100)])
    model = StringField('Model', validators=[Optional(), Length(max=100)])
    purchase_date = DateField('Purchase date', validators=[Optional()])
    purchase_price = DecimalField('Purchase price', validators=[Optional(), NumberRange(min=0)])
    warranty_expiration = DateField('Warranty expiration', validators=[Optional()])
    category_id = IntegerField('Category', validators=[Optional()])
    department_id = IntegerField('Department', validators=[Optional()])


class AssetForm(AssetUpdateForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    status = StringField('Status', validators=[Optional(), AnyOf(AssetStatus.values())])
    assigned_to_id = IntegerField('Assigned to', validators=[Optional()])


class StatusForm(ApiForm):
    status = StringField('Status', validators=[DataRequired(), AnyOf(AssetStatus.values())])
    notes = TextAreaField('Notes', validators=[Optional(), Length(max=1000)])


class TransferForm(ApiForm):
    department_id = IntegerField('Department', validators=[Optional()])
    assigned_to_id = IntegerField('Assigned to', validators=[Optional()])
    location = StringField('Location', validators=[Optional(), Length(max=200)])
    notes = TextAreaField('Notes', validators=[Optional(), Length(max=1000)])


class NoteForm(ApiForm):
    content = TextAreaField('Content', validators=[DataRequired(), Length(max=5000)])


class MaintenanceForm(ApiForm):
    maintenance_type = StringField('Type', validators=[DataRequired(), AnyOf(MaintenanceType.values())])
    description = TextAreaField('Description', validators=[DataRequired()])
    scheduled_date = DateField('Scheduled date', validators=[DataRequired()])
    completed_date = DateField('Completed date', validators=[Optional()])
    cost = DecimalField('Cost', validators=[Optional(), NumberRange(min=0)])
    performed_by = StringField('Performed by', validators=[Optional(), Length(max=200)])
    notes = TextAreaField('Notes', validators=[Optional()])
