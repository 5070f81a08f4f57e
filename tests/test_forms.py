import json

import pytest

from fulcrum.accounts.forms import SignupForm
from fulcrum.activities.forms import ActivityBulkActionForm, ActivityForm


@pytest.mark.django_db
def test_activity_form_accepts_valid_submission(activity_post_data):
    form = ActivityForm(data=activity_post_data)
    assert form.is_valid(), form.errors
    activity = form.save()
    assert activity.category == ['team building', 'reflection']
    assert activity.grade_level == '3-5'
    assert activity.group_size == '10-20'


@pytest.mark.django_db
def test_title_is_required(activity_post_data):
    activity_post_data['title'] = '   '
    form = ActivityForm(data=activity_post_data)
    assert not form.is_valid()
    assert form.errors['title'] == ['Title is required']


@pytest.mark.django_db
def test_at_least_one_category_is_required(activity_post_data):
    activity_post_data['category'] = []
    form = ActivityForm(data=activity_post_data)
    assert not form.is_valid()
    assert form.errors['category'] == ['Please select at least one category']


@pytest.mark.django_db
def test_group_size_required_unless_any(activity_post_data):
    activity_post_data['group_size_min'] = ''
    activity_post_data['group_size_max'] = ''
    form = ActivityForm(data=activity_post_data)
    assert not form.is_valid()
    assert 'Group size is required' in form.non_field_errors()

    activity_post_data['group_size_any'] = 'on'
    form = ActivityForm(data=activity_post_data)
    assert form.is_valid(), form.errors


@pytest.mark.django_db
def test_any_size_clears_stored_range(activity_post_data):
    activity_post_data['group_size_any'] = 'on'
    form = ActivityForm(data=activity_post_data)
    assert form.is_valid(), form.errors
    activity = form.save()
    assert activity.group_size_min is None
    assert activity.group_size_max is None
    assert activity.group_size == 'Any'


@pytest.mark.django_db
def test_ranges_must_be_ordered(activity_post_data):
    activity_post_data.update(grade_min='8', grade_max='2', group_size_min='30', group_size_max='10')
    form = ActivityForm(data=activity_post_data)
    assert not form.is_valid()
    assert 'grade_max' in form.errors
    assert 'group_size_max' in form.errors


@pytest.mark.django_db
def test_group_size_must_be_at_least_one(activity_post_data):
    activity_post_data.update(group_size_min='0', group_size_max='10')
    form = ActivityForm(data=activity_post_data)
    assert not form.is_valid()
    assert 'group_size_min' in form.errors


@pytest.mark.django_db
def test_custom_sections_are_cleaned(activity_post_data):
    activity_post_data['custom_sections_input'] = json.dumps([
        {'id': 'keep1', 'name': ' Debrief ', 'content': 'Circle up.'},
        {'name': '', 'content': 'dropped'},
        {'name': 'Extension', 'content': 'Add a timer.'},
    ])
    form = ActivityForm(data=activity_post_data)
    assert form.is_valid(), form.errors
    sections = form.save().custom_sections
    assert [s['name'] for s in sections] == ['Debrief', 'Extension']
    assert sections[0]['id'] == 'keep1'
    assert sections[1]['id']


@pytest.mark.django_db
def test_malformed_custom_sections_rejected(activity_post_data):
    activity_post_data['custom_sections_input'] = '{not json'
    form = ActivityForm(data=activity_post_data)
    assert not form.is_valid()
    assert 'custom_sections_input' in form.errors


@pytest.mark.django_db
def test_edit_form_prefills_json_fields(make_activity):
    activity = make_activity(custom_sections=[{'id': 'x1', 'name': 'Notes', 'content': ''}])
    form = ActivityForm(instance=activity)
    assert form.initial['category'] == ['team building']
    assert json.loads(form.initial['custom_sections_input'])[0]['name'] == 'Notes'


@pytest.mark.django_db
def test_bulk_form_requires_selection():
    form = ActivityBulkActionForm(data={'action': 'archive'})
    assert not form.is_valid()
    assert form.errors['activities'] == ['No activities selected.']


@pytest.mark.django_db
class TestSignupForm:
    def _data(self, **overrides):
        data = {
            'full_name': 'Ada Park',
            'email': 'Ada@Example.org',
            'password': 'longenough1',
            'confirm_password': 'longenough1',
        }
        data.update(overrides)
        return data

    def test_valid_signup_hashes_password(self):
        form = SignupForm(data=self._data())
        assert form.is_valid(), form.errors
        user = form.save()
        assert user.email == 'ada@example.org'
        assert user.check_password('longenough1')

    def test_password_mismatch(self):
        form = SignupForm(data=self._data(confirm_password='different1'))
        assert not form.is_valid()
        assert form.errors['confirm_password'] == ['Passwords do not match']

    def test_password_minimum_length(self):
        form = SignupForm(data=self._data(password='short', confirm_password='short'))
        assert not form.is_valid()
        assert form.errors['password'] == ['Password must be at least 8 characters']

    def test_all_fields_required(self):
        form = SignupForm(data={})
        assert not form.is_valid()
        assert set(form.errors) == {'full_name', 'email', 'password', 'confirm_password'}

    def test_duplicate_email_rejected(self, user):
        form = SignupForm(data=self._data(email=user.email.upper()))
        assert not form.is_valid()
        assert 'email' in form.errors
