from flask_login import current_user


def current_session():

    if not current_user.is_authenticated:
        return None

    return current_user.to_session()
