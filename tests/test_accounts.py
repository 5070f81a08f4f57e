import pytest
from django.urls import reverse

from .conftest import PASSWORD


def _messages(response):
    return [str(message) for message in response.context['messages']]


@pytest.mark.django_db
def test_login_success_redirects_to_list(client, user):
    response = client.post(
        reverse('accounts:login'),
        {'username': 'Facilitator@Example.org', 'password': PASSWORD},
        follow=True,
    )
    assert response.redirect_chain[-1][0] == reverse('activities:activity_list')
    assert response.context['user'].is_authenticated
    assert 'Signed in successfully' in _messages(response)


@pytest.mark.django_db
def test_login_bad_credentials(client, user):
    response = client.post(reverse('accounts:login'), {'username': user.email, 'password': 'wrong-password'})
    assert response.status_code == 200
    assert response.context['form'].non_field_errors()
    assert '_auth_user_id' not in client.session


@pytest.mark.django_db
def test_login_requires_both_fields(client):
    response = client.post(reverse('accounts:login'), {'username': '', 'password': ''})
    form = response.context['form']
    assert 'username' in form.errors
    assert 'password' in form.errors


@pytest.mark.django_db
def test_remember_me_controls_session_expiry(client, user):
    client.post(reverse('accounts:login'), {'username': user.email, 'password': PASSWORD})
    assert client.session.get_expire_at_browser_close()

    client.logout()
    client.post(reverse('accounts:login'), {'username': user.email, 'password': PASSWORD, 'remember_me': 'on'})
    assert not client.session.get_expire_at_browser_close()


@pytest.mark.django_db
def test_repeated_failures_lock_out(client, user, settings):
    for _ in range(settings.AXES_FAILURE_LIMIT):
        client.post(reverse('accounts:login'), {'username': user.email, 'password': 'wrong-password'})
    response = client.post(reverse('accounts:login'), {'username': user.email, 'password': PASSWORD})
    assert response.status_code == 429
    assert '_auth_user_id' not in client.session


@pytest.mark.django_db
def test_signup_creates_account_and_logs_in(client, django_user_model):
    response = client.post(
        reverse('accounts:signup'),
        {
            'full_name': 'Ada Park',
            'email': 'ada@example.org',
            'password': 'longenough1',
            'confirm_password': 'longenough1',
        },
        follow=True,
    )
    assert django_user_model.objects.filter(email='ada@example.org').exists()
    assert response.context['user'].is_authenticated
    assert 'Account created successfully' in _messages(response)


@pytest.mark.django_db
def test_signup_redirects_when_signed_in(auth_client):
    response = auth_client.get(reverse('accounts:signup'))
    assert response.status_code == 302


@pytest.mark.django_db
def test_logout_get_confirms_post_logs_out(auth_client):
    response = auth_client.get(reverse('accounts:logout'))
    assert response.status_code == 200
    assert '_auth_user_id' in auth_client.session

    response = auth_client.post(reverse('accounts:logout'))
    assert response.status_code == 302
    assert '_auth_user_id' not in auth_client.session


@pytest.mark.django_db
def test_settings_requires_login(client):
    response = client.get(reverse('accounts:settings'))
    assert response.status_code == 302


@pytest.mark.django_db
def test_profile_update(auth_client, user):
    response = auth_client.post(
        reverse('accounts:settings'),
        {'form': 'profile', 'full_name': 'Jamie R.', 'email': 'jamie@example.org'},
        follow=True,
    )
    user.refresh_from_db()
    assert user.full_name == 'Jamie R.'
    assert user.email == 'jamie@example.org'
    assert 'Profile updated successfully' in _messages(response)


@pytest.mark.django_db
def test_password_change_keeps_session(auth_client, user):
    response = auth_client.post(
        reverse('accounts:settings'),
        {
            'form': 'password',
            'old_password': PASSWORD,
            'new_password1': 'brand-new-secret',
            'new_password2': 'brand-new-secret',
        },
        follow=True,
    )
    user.refresh_from_db()
    assert user.check_password('brand-new-secret')
    assert response.context['user'].is_authenticated
    assert 'Password changed successfully' in _messages(response)


@pytest.mark.django_db
def test_password_change_mismatch(auth_client, user):
    response = auth_client.post(
        reverse('accounts:settings'),
        {
            'form': 'password',
            'old_password': PASSWORD,
            'new_password1': 'brand-new-secret',
            'new_password2': 'other-new-secret',
        },
    )
    assert response.status_code == 200
    assert response.context['password_form'].errors['new_password2'] == ['Passwords do not match']
    user.refresh_from_db()
    assert user.check_password(PASSWORD)
