def test_register_and_login(client):
    response = client.post('/api/auth/register',
                           json={'email': 'Linh@Example.com', 'password': 'secret123',
                                 'full_name': 'Linh Do', 'region': 'kanto'})

    assert response.status_code == 201
    data = response.get_json()
    assert data['access_token']
    assert data['user']['email'] == 'linh@example.com'
    assert data['user']['role'] == 'participant'
    assert 'password_hash' not in data['user']

    response = client.post('/api/auth/login',
                           json={'email': 'linh@example.com', 'password': 'secret123'})
    assert response.status_code == 200
    assert response.get_json()['access_token']


def test_register_duplicate_email(client, make_user):
    make_user(email='taken@test.com')
    response = client.post('/api/auth/register',
                           json={'email': 'taken@test.com', 'password': 'secret123',
                                 'full_name': 'Someone'})
    assert response.status_code == 409


def test_register_validation(client):
    response = client.post('/api/auth/register',
                           json={'email': 'not-an-email', 'password': '123',
                                 'full_name': 'X'})
    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'email' in errors
    assert 'password' in errors


def test_login_invalid_credentials(client, make_user):
    make_user(email='user@test.com', password='rightpass')
    response = client.post('/api/auth/login',
                           json={'email': 'user@test.com', 'password': 'wrongpass'})
    assert response.status_code == 401


def test_inactive_user_is_rejected(client, make_user, auth_headers_for):
    from confreg import db

    user = make_user(email='gone@test.com', password='rightpass')
    headers = auth_headers_for(user)
    user.is_active = False
    db.session.commit()

    login = client.post('/api/auth/login',
                        json={'email': 'gone@test.com', 'password': 'rightpass'})
    assert login.status_code == 401
    assert client.get('/api/auth/profile', headers=headers).status_code == 401


def test_profile(client, make_user, auth_headers_for):
    user = make_user(email='me@test.com')
    headers = auth_headers_for(user)

    response = client.get('/api/auth/profile', headers=headers)
    assert response.status_code == 200
    assert response.get_json()['user']['email'] == 'me@test.com'

    response = client.put('/api/auth/profile',
                          json={'full_name': 'New Name', 'region': 'kyushu'},
                          headers=headers)
    assert response.status_code == 200
    assert response.get_json()['user']['region'] == 'kyushu'


def test_profile_requires_token(client):
    assert client.get('/api/auth/profile').status_code == 401


def test_health(client):
    assert client.get('/api/health').get_json() == {'status': 'ok'}
