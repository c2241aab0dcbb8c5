"""
Test suite for the users API.
Tests cover the bearer-token middleware and both user endpoints.
"""

import pytest
import os
import sys

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import models


class TestBearerToken:
    """Test the bearer-token check in front of the users API."""

    def test_missing_header(self, client):
        response = client.get('/api/users')
        assert response.status_code == 401
        assert response.get_json() == {'error': 'Missing token'}

    def test_non_bearer_header(self, client):
        response = client.get('/api/users', headers={'Authorization': 'Basic secret-token'})
        assert response.status_code == 401
        assert response.get_json() == {'error': 'Missing token'}

    def test_empty_bearer(self, client):
        response = client.get('/api/users', headers={'Authorization': 'Bearer '})
        assert response.status_code == 401

    def test_wrong_token(self, client):
        response = client.get('/api/users', headers={'Authorization': 'Bearer nope'})
        assert response.status_code == 403
        assert response.get_json() == {'error': 'Invalid token'}

    def test_token_comes_from_config(self, app, client):
        app.config['API_TOKEN'] = 'rotated'
        response = client.get('/api/users', headers={'Authorization': 'Bearer secret-token'})
        assert response.status_code == 403
        response = client.get('/api/users', headers={'Authorization': 'Bearer rotated'})
        assert response.status_code == 200


class TestUsersEndpoints:
    """Test listing and fetching users."""

    def test_list_users(self, client, auth_headers):
        response = client.get('/api/users', headers=auth_headers)
        assert response.status_code == 200
        data = response.get_json()
        assert data['message'] == 'Hello admin, here are the users'
        assert data['data'] == [
            {'id': 1, 'name': 'Angela', 'email': 'angela@example.com'},
            {'id': 2, 'name': 'Miggy', 'email': 'miggy@example.com'},
        ]

    def test_get_user(self, client, auth_headers):
        response = client.get('/api/users/2', headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json() == {'data': {'id': 2, 'name': 'Miggy', 'email': 'miggy@example.com'}}

    @pytest.mark.parametrize('user_id', ['99', 'abc'])
    def test_user_not_found(self, client, auth_headers, user_id):
        response = client.get(f'/api/users/{user_id}', headers=auth_headers)
        assert response.status_code == 404
        assert response.get_json() == {'error': 'User not found'}

    def test_get_user_requires_token(self, client):
        response = client.get('/api/users/1')
        assert response.status_code == 401


class TestUserModel:
    """Test the in-memory user model."""

    def test_get_user_by_id(self):
        assert models.get_user_by_id(1)['name'] == 'Angela'

    def test_get_missing_user(self):
        assert models.get_user_by_id(3) is None
