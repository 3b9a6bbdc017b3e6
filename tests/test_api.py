import pytest


@pytest.mark.django_db
def test_health_is_public(client):
    response = client.get('/api/health/')

    assert response.status_code == 200
    assert response.json()['status'] == 'ok'


@pytest.mark.django_db
def test_token_login(client, staff_user):
    response = client.post('/api/auth/token/', {'username': 'staff', 'password': 'staff-pass-123'}, format='json')

    assert response.status_code == 200
    token = response.json()['access']

    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    response = client.get('/api/users/me/')
    assert response.status_code == 200
    assert response.json()['role'] == 'staff'


@pytest.mark.django_db
def test_token_login_with_bad_password(client, staff_user):
    response = client.post('/api/auth/token/', {'username': 'staff', 'password': 'wrong'}, format='json')

    assert response.status_code == 401
    assert 'message' in response.json()


@pytest.mark.django_db
def test_admin_role_grants_admin_site_access(admin_user):
    assert admin_user.is_staff
    assert admin_user.is_pharmacy_admin


@pytest.mark.django_db
def test_unhandled_error_becomes_500(staff_client, monkeypatch):
    from medicine import views

    def broken_summarize(*args, **kwargs):
        raise RuntimeError('boom')

    monkeypatch.setattr(views.expiry, 'summarize', broken_summarize)

    response = staff_client.get('/api/medicines/summary/')

    assert response.status_code == 500
    assert response.json() == {'message': 'Server error'}
