from datetime import date, timedelta

from aceleradora.extensions import db, rq
from aceleradora.models import Evaluation

from conftest import login, make_convocatoria, make_submitted_applicant, make_user


def test_requires_login(client):
    assert client.get('/').status_code == 401
    assert client.get('/startups').status_code == 401


def test_first_signup_is_open_then_admin_only(client, app):
    r = client.post('/auth/signup', json={'email': 'root@example.com', 'password': 'longpassword',
                                          'confirm': 'longpassword'})
    assert r.status_code == 201
    assert r.get_json()['user']['role'] == 'admin'
    r = client.post('/auth/signup', json={'email': 'other@example.com', 'password': 'longpassword',
                                          'confirm': 'longpassword'})
    assert r.status_code == 403


def test_first_admin_signup_after_founder_registered(client, app):
    r = client.post('/auth/register', json={'name': 'Ana', 'email': 'ana@example.com',
                                            'password': 'secret123', 'confirm': 'secret123'})
    assert r.get_json()['user']['role'] == 'user'
    client.post('/auth/logout')
    r = client.post('/auth/signup', json={'email': 'root@example.com', 'password': 'longpassword',
                                          'confirm': 'longpassword'})
    assert r.status_code == 201
    assert r.get_json()['user']['role'] == 'admin'
    r = client.post('/auth/signup', json={'email': 'other@example.com', 'password': 'longpassword',
                                          'confirm': 'longpassword'})
    assert r.status_code == 403


def test_register_login_and_bad_credentials(client, app):
    r = client.post('/auth/register', json={'name': 'Ana', 'email': 'Ana@example.com',
                                            'password': 'secret123', 'confirm': 'secret123'})
    assert r.status_code == 201
    assert r.get_json()['user']['email'] == 'ana@example.com'
    client.post('/auth/logout')
    assert login(client, 'ana@example.com', 'wrong-pass').status_code == 401
    assert login(client, 'ana@example.com').status_code == 200
    assert client.get('/auth/me').get_json()['user']['role'] == 'user'


def test_register_validation_errors(client, app):
    r = client.post('/auth/register', json={'email': 'not-an-email', 'password': 'x', 'confirm': 'y'})
    assert r.status_code == 400
    fields = r.get_json()['fields']
    assert {'name', 'email', 'password', 'confirm'} <= set(fields)


def test_admin_creates_and_publishes_convocatoria(client, admin):
    login(client, admin.email)
    r = client.post('/convocatorias', json={
        'titulo': 'Acelera 2026', 'descripcion': 'Programa anual', 'tipo': 'general',
        'fecha_inicio': date.today().isoformat(),
        'fecha_fin': (date.today() + timedelta(days=60)).isoformat(),
    })
    assert r.status_code == 201
    conv = r.get_json()
    assert conv['estado'] == 'borrador'
    assert len(conv['criterios']) == 16
    assert {c['category'] for c in conv['criterios']} == {'complejidad', 'mercado', 'escalabilidad', 'equipo'}

    r = client.put(f"/convocatorias/{conv['id']}/criterios", json={'criterios': [
        {'category': 'COMPLEJIDAD', 'prompt': '¿Qué problema resuelven?'},
        {'category': 'equipo', 'prompt': '¿Quiénes son?', 'weight': 2},
    ]})
    assert r.status_code == 200
    assert len(r.get_json()['criterios']) == 2

    r = client.put(f"/convocatorias/{conv['id']}/criterios", json={'criterios': [
        {'category': 'finanzas', 'prompt': '¿?'}]})
    assert r.status_code == 400

    assert client.post(f"/convocatorias/{conv['id']}/publicar").status_code == 200
    r = client.put(f"/convocatorias/{conv['id']}/criterios", json={'criterios': [
        {'category': 'mercado', 'prompt': 'otro'}]})
    assert r.status_code == 409


def test_convocatoria_dates_validated(client, admin):
    login(client, admin.email)
    r = client.post('/convocatorias', json={
        'titulo': 'X', 'descripcion': 'Y',
        'fecha_inicio': '2026-05-01', 'fecha_fin': '2026-04-01',
    })
    assert r.status_code == 400
    assert 'fecha_fin' in r.get_json()['fields']


def test_user_cannot_create_convocatoria(client, founder):
    login(client, founder.email)
    r = client.post('/convocatorias', json={'titulo': 'X', 'descripcion': 'Y',
                                            'fecha_inicio': '2026-01-01', 'fecha_fin': '2026-02-01'})
    assert r.status_code == 403


def test_founder_applies_answers_and_submits(client, founder):
    conv = make_convocatoria()
    login(client, founder.email)
    r = client.post('/startups', json={'name': 'QuickFix App', 'industry': 'Consumer', 'founded_year': 2024})
    assert r.status_code == 201
    startup = r.get_json()
    assert startup['members'][0]['role'] == 'Fundador'

    r = client.post('/applications', json={'startup_id': startup['id'], 'convocatoria_id': conv.id})
    assert r.status_code == 201
    applicant = r.get_json()
    assert applicant['status'] == 'borrador'
    assert client.post('/applications', json={'startup_id': startup['id'],
                                              'convocatoria_id': conv.id}).status_code == 409

    criteria = applicant['criterios']
    r = client.put(f"/applications/{applicant['id']}/answers",
                   json={'answers': [{'criterionId': c['id'], 'text': 'Una app'} for c in criteria[:10]]})
    assert r.status_code == 200
    r = client.post(f"/applications/{applicant['id']}/submit")
    assert r.status_code == 400
    assert len(r.get_json()['missing']) == 6

    client.put(f"/applications/{applicant['id']}/answers",
               json={'answers': [{'criterionId': c['id'], 'text': 'Una app'} for c in criteria[10:]]})
    r = client.post(f"/applications/{applicant['id']}/submit")
    assert r.status_code == 200
    assert r.get_json()['status'] == 'enviada'
    r = client.put(f"/applications/{applicant['id']}/answers",
                   json={'answers': [{'criterionId': criteria[0]['id'], 'text': 'cambio'}]})
    assert r.status_code == 409


def test_cannot_apply_for_someone_elses_startup(client, founder):
    conv = make_convocatoria()
    other = make_user('other@example.com')
    applicant = make_submitted_applicant(other, conv)
    login(client, founder.email)
    r = client.post('/applications', json={'startup_id': applicant.startup_id, 'convocatoria_id': conv.id})
    assert r.status_code == 403
    assert client.get(f'/applications/{applicant.id}').status_code == 403


def test_closed_convocatoria_rejects_applications(client, founder):
    conv = make_convocatoria(estado='cerrada')
    login(client, founder.email)
    startup = client.post('/startups', json={'name': 'Late'}).get_json()
    r = client.post('/applications', json={'startup_id': startup['id'], 'convocatoria_id': conv.id})
    assert r.status_code == 400


def test_admin_evaluation_flow(client, admin, founder):
    conv = make_convocatoria()
    applicant = make_submitted_applicant(founder, conv, text='Poco desarrollado')
    login(client, admin.email)

    listing = client.get('/evaluaciones').get_json()
    assert listing[0]['hasEvaluation'] is False

    r = client.post('/evaluaciones/iniciar', json={'applicant_id': applicant.id})
    assert r.status_code == 201
    ev_id = r.get_json()['id']
    r = client.post('/evaluaciones/iniciar', json={'applicant_id': applicant.id})
    assert r.status_code == 409
    assert r.get_json()['evaluationId'] == ev_id

    grouped = client.get(f'/evaluaciones/{ev_id}/respuestas').get_json()
    assert {k: len(v) for k, v in grouped['respuestas'].items()} == {
        'complejidad': 4, 'mercado': 4, 'escalabilidad': 4, 'equipo': 4}

    # no API key in tests: AI path degrades to the 50/100 fallback
    r = client.post(f'/evaluaciones/{ev_id}/ia')
    assert r.status_code == 200
    assert r.get_json()['totalScore'] == 50.0

    scores = [{'criterionId': c.id, 'rawScore': 1, 'justification': 'Respuesta débil'} for c in conv.criteria]
    r = client.post(f'/evaluaciones/{ev_id}/manual', json={'scores': scores})
    assert r.status_code == 200
    body = r.get_json()
    assert body['status'] == 'in_review'
    assert body['totalScore'] == 25.0
    assert body['recommendation'] == 'rechazado'

    r = client.post(f'/evaluaciones/{ev_id}/manual', json={'scores': [{'criterionId': conv.criteria[0].id,
                                                                      'rawScore': 9}]})
    assert r.status_code == 400

    r = client.post(f'/evaluaciones/{ev_id}/completar', json={})
    assert r.status_code == 200
    assert r.get_json()['status'] == 'completed'
    db.session.refresh(applicant)
    assert applicant.status == 'rechazada'
    assert client.post(f'/evaluaciones/{ev_id}/ia').status_code == 409

    client.post('/auth/logout')
    login(client, founder.email)
    r = client.get(f'/evaluaciones/{ev_id}')
    assert r.status_code == 200
    assert r.get_json()['recommendation'] == 'rechazado'
    assert client.get('/evaluaciones').status_code == 403


def test_member_of_other_startup_cannot_read_evaluation(client, admin, founder):
    conv = make_convocatoria()
    applicant = make_submitted_applicant(founder, conv)
    ev = Evaluation(applicant_id=applicant.id, status='pending')
    db.session.add(ev)
    db.session.commit()
    make_user('stranger@example.com')
    login(client, 'stranger@example.com')
    assert client.get(f'/evaluaciones/{ev.id}').status_code == 403


class UnreachableQueue:
    def enqueue(self, *args, **kwargs):
        raise ConnectionError('redis down')


def test_ai_request_runs_inline_when_enqueue_fails(client, admin, founder, monkeypatch):
    conv = make_convocatoria()
    applicant = make_submitted_applicant(founder, conv)
    ev = Evaluation(applicant_id=applicant.id, status='pending')
    db.session.add(ev)
    db.session.commit()
    monkeypatch.setattr(rq, 'queue', UnreachableQueue())
    login(client, admin.email)
    r = client.post(f'/evaluaciones/{ev.id}/ia')
    assert r.status_code == 200
    body = r.get_json()
    assert body['totalScore'] == 50.0
    assert body['modelVersion'] == 'fallback'


def test_preview_scores_raw_items(client, admin):
    login(client, admin.email)
    r = client.post('/evaluaciones/preview', json={'scores': [
        {'criterionId': 'a', 'category': 'complejidad', 'rawScore': 4, 'scaleMax': 4},
        {'criterionId': 'b', 'category': 'MERCADO', 'rawScore': 60, 'scaleMax': 100, 'confidence': 0.9},
    ]})
    assert r.get_json() == {'perCategory': {'complejidad': 100.0, 'mercado': 60.0},
                            'total': 80.0, 'recommendation': 'aprobado'}
    r = client.post('/evaluaciones/preview', json={'scores': [
        {'criterionId': 'a', 'category': 'finanzas', 'rawScore': 4, 'scaleMax': 4}]})
    assert r.status_code == 400
    r = client.post('/evaluaciones/preview', json={'scores': [
        {'criterionId': 'b', 'category': 'mercado', 'rawScore': 80, 'scaleMax': 100, 'confidence': 'alta'}]})
    assert r.status_code == 400
    assert client.post('/evaluaciones/preview', json={'scores': []}).get_json()['recommendation'] == 'pendiente'


def test_admin_dashboard_stats(client, admin, founder):
    conv = make_convocatoria()
    make_submitted_applicant(founder, conv)
    login(client, admin.email)
    stats = client.get('/').get_json()['stats']
    assert stats['startups'] == 1
    assert stats['applicants'] == {'enviada': 1}
