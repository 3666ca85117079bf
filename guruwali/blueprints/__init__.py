from guruwali.auth.routes import auth_bp
from guruwali.main.routes import main_bp
from guruwali.students.routes import students_bp
from guruwali.file_uploads.routes import uploads_bp
from guruwali.downloads.routes import downloads_bp
from guruwali.journals.routes import journals_bp
from guruwali.meetings.routes import meetings_bp
from guruwali.interventions.routes import interventions_bp
from guruwali.settings.routes import settings_bp

def register_blueprints(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(downloads_bp)
    app.register_blueprint(students_bp)
    app.register_blueprint(journals_bp)
    app.register_blueprint(meetings_bp)
    app.register_blueprint(interventions_bp)
    app.register_blueprint(settings_bp)
