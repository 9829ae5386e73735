import hmac
import logging
from datetime import datetime
from functools import wraps
from flask import Blueprint, render_template, request, redirect, url_for, session, flash, current_app, jsonify

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if not session.get('operator'):
            if request.path.startswith('/api/'):
                return jsonify({'error': 'Authentication required'}), 401
            return redirect(url_for('auth.login', next=request.path))
        return f(*args, **kwargs)
    return decorated


def _check_credentials(username: str, password: str) -> bool:
    expected_user = current_app.config['LOGIN_USERNAME']
    expected_pass = current_app.config['LOGIN_PASSWORD']
    # evaluate both comparisons so timing does not reveal which one failed
    user_ok = hmac.compare_digest(username.encode(), expected_user.encode())
    pass_ok = hmac.compare_digest(password.encode(), expected_pass.encode())
    return user_ok and pass_ok


def _safe_next(target: str) -> str:
    if target.startswith('/') and not target.startswith('//'):
        return target
    return url_for('main.dashboard')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if session.get('operator'):
        return redirect(url_for('main.dashboard'))

    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')

        if _check_credentials(username, password):
            session.clear()
            session['operator'] = username
            session['login_at'] = datetime.now().isoformat(timespec='seconds')
            logger.info("Operator %s signed in", username)
            return redirect(_safe_next(request.args.get('next', '')))

        logger.warning("Failed sign-in for %r from %s", username, request.remote_addr)
        flash('Usuário ou senha inválidos', 'error')

    return render_template('login.html')


@auth_bp.route('/logout')
def logout():
    operator = session.get('operator')
    session.clear()
    if operator:
        logger.info("Operator %s signed out", operator)
        flash('Sessão encerrada', 'info')
    return redirect(url_for('auth.login'))
