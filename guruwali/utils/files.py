import os
from flask import current_app


def allowed_file(filename, allowed):

    return (
        "." in filename and
        filename.rsplit(".", 1)[1].lower() in allowed
    )


def allowed_photo_file(filename):

    return allowed_file(
        filename,
        current_app.config["ALLOWED_PHOTO_EXTENSIONS"]
    )


def allowed_import_file(filename):

    return allowed_file(
        filename,
        current_app.config["ALLOWED_IMPORT_EXTENSIONS"]
    )


# ---------------- BLOB STORE ---------------- #
# Keys are paths relative to UPLOAD_FOLDER, e.g. "photos/<student_id>.jpg"

def blob_path(key):
    # absolute, send_file resolves relative paths against the app root
    return os.path.abspath(
        os.path.join(current_app.config["UPLOAD_FOLDER"], key)
    )


def save_blob(key, data):
    path = blob_path(key)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "wb") as fh:
        fh.write(data)

    return key


def blob_exists(key):
    return bool(key) and os.path.isfile(blob_path(key))


def delete_blob(key):
    if not key:
        return False

    try:
        os.remove(blob_path(key))
    except FileNotFoundError:
        return False

    return True
