from assetsup import db, login_manager
from werkzeug.security import generate_password_hash, check_password_hash
from flask import current_app
from flask_login import UserMixin
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from datetime import datetime
from assetsup.buisness.core.data_insertion_mixin import DataInsertionMixin
from assetsup.data.core.user_info.password_validator import PasswordValidator

TOKEN_SALT = 'assetsup.access-token'


class User(UserMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'users'

    hidden_fields = ('password_hash',)

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    is_admin = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def set_password(self, password):
        is_valid, error_message = PasswordValidator.validate(password)
        if not is_valid:
            raise ValueError(error_message)
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def generate_access_token(self):
        """Signed bearer token carrying the user id"""
        serializer = URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)
        return serializer.dumps({'uid': self.id})

    @classmethod
    def from_access_token(cls, token):
        """
        Resolve a bearer token to an active user.

        Returns:
            User or None when the token is malformed, expired or the account is disabled
        """
        serializer = URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)
        try:
            data = serializer.loads(token, max_age=current_app.config['ACCESS_TOKEN_MAX_AGE'])
        except (BadSignature, SignatureExpired):
            return None
        user = db.session.get(cls, data.get('uid'))
        if user is None or not user.is_active:
            return None
        return user

    def to_summary(self):
        return {'id': self.id, 'email': self.email, 'name': self.name}

    def to_dict(self, include_relationships=False, include_audit_fields=True):
        result = super().to_dict(include_relationships, include_audit_fields)
        result['name'] = self.name
        return result

    def __repr__(self):
        return f'<User {self.email}>'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    header = req.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        return None
    return User.from_access_token(token.strip())
