from flask import Blueprint, request, current_app, send_from_directory
from flask_login import login_user, logout_user, login_required, current_user
from http import HTTPStatus
from minigames import db
from minigames.models import User
from minigames.responses import ErrorResponse, SuccessResponse

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return SuccessResponse(HTTPStatus.OK, 'Welcome to the mini-games server!').to_response()


@main.route('/api/auth/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        raise ErrorResponse(HTTPStatus.BAD_REQUEST, 'Missing username or password')

    if User.query.filter_by(username=username).first():
        raise ErrorResponse(HTTPStatus.BAD_REQUEST, 'Username already exists')

    user = User(username=username)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    current_app.logger.info(f"[register] user={user.id} username={user.username}")
    return SuccessResponse(HTTPStatus.CREATED, 'User created successfully', user.to_dict()).to_response()


@main.route('/api/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=data.get('username')).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return SuccessResponse(HTTPStatus.OK, 'Logged in successfully', user.to_dict()).to_response()
    raise ErrorResponse(HTTPStatus.UNAUTHORIZED, 'Invalid username or password')


@main.route('/api/auth/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return SuccessResponse(HTTPStatus.OK, 'Logged out successfully').to_response()


@main.route('/api/auth/me')
@login_required
def me():
    return SuccessResponse(HTTPStatus.OK, 'Get current user successfully', current_user.to_dict()).to_response()


@main.route('/uploads/<path:filename>')
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
