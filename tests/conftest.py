import pytest

from fulcrum.activities.models import Activity


PASSWORD = 'correct-horse-battery'


@pytest.fixture()
def user(django_user_model):
    return django_user_model.objects.create_user(
        email='facilitator@example.org',
        password=PASSWORD,
        full_name='Jamie Rivera',
    )


@pytest.fixture()
def auth_client(client, user):
    # force_login bypasses the axes backend, which needs a real request
    client.force_login(user)
    return client


@pytest.fixture()
def make_activity(user):
    def _make(**overrides):
        values = {
            'title': 'Human Knot',
            'category': ['team building'],
            'energy_level': Activity.EnergyLevel.MEDIUM,
            'duration': Activity.Duration.FROM_15_TO_20,
            'grade_min': 6,
            'grade_max': 8,
            'group_size_min': 8,
            'group_size_max': 12,
            'setup': Activity.Setup.NO_PROP,
            'status': Activity.Status.PUBLISHED,
            'overview': 'Untangle a circle of linked hands.',
            'created_by': user,
            'updated_by': user,
        }
        values.update(overrides)
        return Activity.objects.create(**values)
    return _make


@pytest.fixture()
def activity_post_data():
    """Minimal valid editor submission."""
    return {
        'title': 'Trust Walk',
        'category': ['team building', 'reflection'],
        'grade_min': '3',
        'grade_max': '5',
        'group_size_min': '10',
        'group_size_max': '20',
        'energy_level': 'low',
        'duration': '30+ min',
        'setup': 'prop',
        'overview': 'Guide a blindfolded partner.',
        'thumbnail_url': '',
        'prep': 'Clear the space.',
        'setup_instructions': '',
        'materials': 'Blindfolds\nCones',
        'play': 'Pairs take turns.',
        'reflection': 'How did it feel to lead?',
        'variations': '',
        'safety': 'Spotters at the edges.',
        'custom_sections_input': '[]',
    }
