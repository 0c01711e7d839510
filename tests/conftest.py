import os
import sys
from datetime import date, timedelta

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from aceleradora import create_app
from aceleradora.extensions import db
from aceleradora.models import Applicant, Answer, Convocatoria, Criterion, Startup, User
from aceleradora.services.rubric import default_criteria


@pytest.fixture
def app():
    app = create_app('config.TestConfig')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, role='user', password='secret123', name=None):
    u = User(email=email, role=role, name=name or email.split('@')[0])
    u.set_password(password)
    db.session.add(u)
    db.session.commit()
    return u


def make_convocatoria(estado='activa'):
    conv = Convocatoria(titulo='Programa 2026', descripcion='Aceleración', tipo='general',
                        fecha_inicio=date.today() - timedelta(days=1),
                        fecha_fin=date.today() + timedelta(days=30), estado=estado)
    conv.criteria = [Criterion(category=d['category'].value, prompt=d['prompt'], weight=d['weight'],
                               required=d['required'], order=d['order']) for d in default_criteria()]
    db.session.add(conv)
    db.session.commit()
    return conv


def make_submitted_applicant(founder, conv, text='Respuesta detallada'):
    s = Startup(founder_id=founder.id, name='QuickFix App', industry='Consumer')
    db.session.add(s)
    db.session.flush()
    a = Applicant(startup_id=s.id, convocatoria_id=conv.id, status='enviada')
    db.session.add(a)
    db.session.flush()
    for c in conv.criteria:
        db.session.add(Answer(applicant_id=a.id, criterion_id=c.id, text=text, order=c.order))
    db.session.commit()
    return a


def login(client, email, password='secret123'):
    return client.post('/auth/login', json={'email': email, 'password': password})


@pytest.fixture
def admin(app):
    return make_user('admin@example.com', role='admin')


@pytest.fixture
def founder(app):
    return make_user('founder@example.com')
