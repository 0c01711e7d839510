"""Seed a demo database: an admin, an active convocatoria with the default
criteria and the low-performance "QuickFix App" startup with a submitted
application.

Usage:
  python scripts/seed_demo.py            # idempotent, skips existing rows
  ADMIN_PASSWORD=secret python scripts/seed_demo.py
"""

import os
import sys
from datetime import date, datetime, timedelta

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from aceleradora import create_app
from aceleradora.extensions import db
from aceleradora.models import Answer, Applicant, Convocatoria, Criterion, Member, Startup, User
from aceleradora.models.user import ROLE_ADMIN, ROLE_USER
from aceleradora.services.rubric import default_criteria

CONVOCATORIA_TITLE = 'Convocatoria Demo de Aceleración'

# one weak answer per default question, in questionnaire order
QUICKFIX_ANSWERS = [
    'La gente no sabe arreglar cosas simples en casa como cambiar un foco o arreglar una llave que gotea.',
    'Mi hermano me dijo que no sabe cambiar un foco y mi vecino tiene una llave que gotea.',
    'Hay videos en YouTube y páginas web con tutoriales.',
    'Es más fácil de usar que buscar en YouTube.',
    'Todas las personas que viven en casas o departamentos.',
    'Le pregunté a algunos amigos y dijeron que sería útil.',
    'Como 5 o 6 personas.',
    'Todos dijeron que sí, pero nadie ha pagado nada.',
    'Por redes sociales y boca a boca.',
    'Que más gente use la app.',
    'No sé, aún no he pensado en eso.',
    'No entiendo qué son los efectos de red.',
    'Soy programador y me gusta arreglar cosas.',
    'Solo soy yo trabajando en esto.',
    'Aún no hemos superado muchos desafíos.',
    'Trabajo en esto cuando tengo tiempo libre.',
]


def get_or_create_user(email, name, role, password):
    user = User.query.filter_by(email=email).first()
    if user:
        return user, False
    user = User(email=email, name=name, role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.flush()
    return user, True


def seed():
    admin, created = get_or_create_user(
        'admin@aceleradora.dev', 'Administrador', ROLE_ADMIN, os.getenv('ADMIN_PASSWORD', 'admin1234'))
    print('admin:', admin.email, '(created)' if created else '(exists)')

    founder, _ = get_or_create_user(
        'juan@quickfix.com', 'Juan Pérez', ROLE_USER, os.getenv('FOUNDER_PASSWORD', 'quickfix1234'))

    conv = Convocatoria.query.filter_by(titulo=CONVOCATORIA_TITLE).first()
    if conv is None:
        today = date.today()
        conv = Convocatoria(
            titulo=CONVOCATORIA_TITLE,
            descripcion='Programa de aceleración para startups en etapa temprana.',
            tipo='aceleracion',
            fecha_inicio=today - timedelta(days=7),
            fecha_fin=today + timedelta(days=60),
            estado='activa',
            created_by_id=admin.id,
            published_at=datetime.utcnow(),
        )
        conv.criteria = [Criterion(category=d['category'].value, prompt=d['prompt'], weight=d['weight'],
                                   required=d['required'], order=d['order'])
                         for d in default_criteria()]
        db.session.add(conv)
        db.session.flush()
        print('convocatoria:', conv.id, 'with', len(conv.criteria), 'criterios')

    startup = Startup.query.filter_by(name='QuickFix App').first()
    if startup is None:
        startup = Startup(
            founder_id=founder.id,
            name='QuickFix App',
            description='Aplicación para arreglar problemas domésticos simples',
            industry='Servicios',
            founded_year=2024,
            website='https://quickfix.com',
            status='activa',
        )
        startup.members = [Member(user_id=founder.id, name=founder.name, email=founder.email, role='Fundador')]
        db.session.add(startup)
        db.session.flush()
        print('startup:', startup.id, startup.name)

    applicant = Applicant.query.filter_by(startup_id=startup.id, convocatoria_id=conv.id).first()
    if applicant is None:
        applicant = Applicant(startup_id=startup.id, convocatoria_id=conv.id, status='enviada',
                              submitted_at=datetime.utcnow())
        db.session.add(applicant)
        db.session.flush()
        for criterion, text in zip(conv.criteria, QUICKFIX_ANSWERS):
            db.session.add(Answer(applicant_id=applicant.id, criterion_id=criterion.id,
                                  text=text, order=criterion.order))
        print('applicant:', applicant.id, 'submitted with', len(QUICKFIX_ANSWERS), 'answers')

    db.session.commit()


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
        seed()
    print('Done.')
