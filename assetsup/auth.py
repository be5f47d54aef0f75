from flask import Blueprint, jsonify, request, abort
from flask_login import login_required, current_user
from assetsup import db, limiter
from assetsup.data.core.user_info.user import User
from assetsup.presentation.forms import RegisterForm, LoginForm
from assetsup.utils.logging_sanitizer import sanitize_payload
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.auth")
auth = Blueprint('auth', __name__)


def _token_response(user, status=200):
    return jsonify({'user': user.to_dict(), 'access_token': user.generate_access_token()}), status


@auth.route('/register', methods=['POST'])
@limiter.limit("20 per hour")
def register():
    logger.debug(f"Registration request: {sanitize_payload(request.get_json(silent=True))}")
    form = RegisterForm.from_json()
    data = form.cleaned_data()
    email = data['email'].lower()

    if User.query.filter_by(email=email).first() is not None:
        logger.warning(f"Registration attempt for existing email: {email}")
        abort(409, description="An account with this email already exists")

    user = User(email=email, first_name=data['first_name'], last_name=data['last_name'])
    # form data strips whitespace, the password must be taken verbatim
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()

    logger.info(f"User registered: {email}")
    return _token_response(user, 201)


@auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    logger.debug(f"Login request: {sanitize_payload(request.get_json(silent=True))}")
    form = LoginForm.from_json()
    email = form.email.data.strip().lower()

    user = User.query.filter_by(email=email).first()

    if user is None or not user.check_password(form.password.data):
        logger.warning(f"Failed login attempt for email: {email}")
        abort(401, description="Invalid email or password")

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {email}")
        abort(401, description="Account is disabled")

    logger.info(f"Successful login for user: {email}")
    return _token_response(user)


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(current_user.to_dict())
