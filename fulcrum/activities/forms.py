import json

from django import forms
from crispy_forms.bootstrap import Tab, TabHolder
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Row, Column, Fieldset, HTML, Div
from .models import Activity, Category, GRADE_LABELS
from .storage import normalize_sections


GRADE_CHOICES = list(enumerate(GRADE_LABELS))


def _blank_choice(label, choices):
    return [('', label)] + list(choices)


class ActivityForm(forms.ModelForm):
    """
    Multi-tab editor for an activity.

    The submit buttons carry the target status (draft or published); the
    view applies it, the form only validates content.
    """

    category = forms.MultipleChoiceField(
        choices=Category.choices,
        widget=forms.CheckboxSelectMultiple,
        required=False,
        label='Category'
    )
    grade_min = forms.TypedChoiceField(
        choices=GRADE_CHOICES,
        coerce=int,
        initial=0,
        label='Grade From'
    )
    grade_max = forms.TypedChoiceField(
        choices=GRADE_CHOICES,
        coerce=int,
        initial=len(GRADE_LABELS) - 1,
        label='Grade To'
    )

    # Hidden field receiving custom sections from the tab editor as JSON
    custom_sections_input = forms.CharField(
        required=False,
        widget=forms.HiddenInput(attrs={'id': 'custom-sections-input'})
    )

    class Meta:
        model = Activity
        fields = [
            'title', 'category', 'grade_min', 'grade_max',
            'group_size_any', 'group_size_min', 'group_size_max',
            'energy_level', 'duration', 'setup', 'overview', 'thumbnail_url',
            'prep', 'setup_instructions', 'materials', 'play', 'reflection',
            'variations', 'safety',
        ]
        widgets = {
            'title': forms.TextInput(attrs={'placeholder': 'Enter activity title'}),
            'group_size_min': forms.NumberInput(attrs={'placeholder': 'Min', 'min': 1}),
            'group_size_max': forms.NumberInput(attrs={'placeholder': 'Max', 'min': 1}),
            'energy_level': forms.Select(choices=_blank_choice('Select energy level', Activity.EnergyLevel.choices)),
            'duration': forms.Select(choices=_blank_choice('Select duration', Activity.Duration.choices)),
            'setup': forms.Select(choices=_blank_choice('Select setup type', Activity.Setup.choices)),
            'overview': forms.Textarea(attrs={'rows': 3, 'placeholder': 'Brief description of the activity...'}),
            'thumbnail_url': forms.URLInput(attrs={'placeholder': 'https://...'}),
            'prep': forms.Textarea(attrs={'rows': 5, 'placeholder': 'Describe what facilitators need to do before the activity...'}),
            'setup_instructions': forms.Textarea(attrs={'rows': 4, 'placeholder': 'Describe how to set up the space...'}),
            'materials': forms.Textarea(attrs={'rows': 4, 'placeholder': 'Cones\nBlindfolds'}),
            'play': forms.Textarea(attrs={'rows': 8, 'placeholder': 'Describe how to facilitate the activity...'}),
            'reflection': forms.Textarea(attrs={'rows': 6, 'placeholder': 'Questions and prompts for reflection...'}),
            'variations': forms.Textarea(attrs={'rows': 4, 'placeholder': 'Alternative ways to run this activity...'}),
            'safety': forms.Textarea(attrs={'rows': 4, 'placeholder': 'Important safety considerations...'}),
        }
        labels = {
            'title': 'Activity Title',
            'group_size_any': 'Any size',
            'group_size_min': 'Group Size From',
            'group_size_max': 'Group Size To',
            'overview': 'Activity Overview',
            'thumbnail_url': 'Thumbnail URL',
            'prep': 'Preparation',
            'setup_instructions': 'Setup',
            'materials': 'Materials',
        }
        error_messages = {
            'title': {'required': 'Title is required'},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Set initial values from instance (JSONFields store lists)
        if self.instance and self.instance.pk:
            self.initial['category'] = self.instance.category
            self.initial['custom_sections_input'] = json.dumps(self.instance.custom_sections)

        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.layout = Layout(
            Fieldset(
                'Basic Information',
                'title',
                Div('category', css_class='category-badges'),
                Row(
                    Column('grade_min', css_class='col-md-6'),
                    Column('grade_max', css_class='col-md-6'),
                ),
                Row(
                    Column('group_size_any', css_class='col-md-4'),
                    Column('group_size_min', css_class='col-md-4'),
                    Column('group_size_max', css_class='col-md-4'),
                ),
                Row(
                    Column('energy_level', css_class='col-md-4'),
                    Column('duration', css_class='col-md-4'),
                    Column('setup', css_class='col-md-4'),
                ),
                'overview',
            ),
            Fieldset(
                'Media',
                'thumbnail_url',
            ),
            Fieldset(
                'Content',
                TabHolder(
                    Tab('Prep', 'prep', 'setup_instructions', 'materials'),
                    Tab('Play', 'play'),
                    Tab('Reflection', 'reflection'),
                    Tab('Additional', 'variations', 'safety'),
                ),
                HTML('{% include "activities/_custom_sections.html" %}'),
                'custom_sections_input',
            ),
        )

    def clean_title(self):
        title = self.cleaned_data.get('title', '').strip()
        if not title:
            raise forms.ValidationError('Title is required')
        return title

    def clean_category(self):
        """Return categories as a list for JSONField storage."""
        categories = list(self.cleaned_data.get('category', []))
        if not categories:
            raise forms.ValidationError('Please select at least one category')
        return categories

    def clean_custom_sections_input(self):
        raw = self.cleaned_data.get('custom_sections_input') or '[]'
        try:
            sections = json.loads(raw)
        except json.JSONDecodeError:
            raise forms.ValidationError('Custom sections could not be read.')
        if not isinstance(sections, list):
            raise forms.ValidationError('Custom sections could not be read.')
        return normalize_sections(sections)

    def clean(self):
        cleaned_data = super().clean()

        grade_min = cleaned_data.get('grade_min')
        grade_max = cleaned_data.get('grade_max')
        if grade_min is not None and grade_max is not None and grade_min > grade_max:
            self.add_error('grade_max', 'Grade range end must not be before its start')

        if cleaned_data.get('group_size_any'):
            cleaned_data['group_size_min'] = None
            cleaned_data['group_size_max'] = None
        else:
            size_min = cleaned_data.get('group_size_min')
            size_max = cleaned_data.get('group_size_max')
            if size_min is None or size_max is None:
                raise forms.ValidationError('Group size is required')
            if size_min > size_max:
                self.add_error('group_size_max', 'Maximum group size must not be below the minimum')

        return cleaned_data

    def save(self, commit=True):
        instance = super().save(commit=False)
        instance.custom_sections = self.cleaned_data.get('custom_sections_input', [])
        if commit:
            instance.save()
        return instance


class ActivityBulkActionForm(forms.Form):
    """Form for bulk actions on activities."""

    ACTION_CHOICES = [
        ('archive', 'Archive'),
        ('delete', 'Delete'),
    ]

    action = forms.ChoiceField(choices=ACTION_CHOICES)
    activities = forms.ModelMultipleChoiceField(
        queryset=Activity.objects.all(),
        widget=forms.CheckboxSelectMultiple,
        error_messages={'required': 'No activities selected.'},
    )


class ActivityImportForm(forms.Form):
    """Upload a JSON array of activities."""

    import_file = forms.FileField(
        label='JSON file',
        help_text='An array of activities, e.g. an export from this page.'
    )
    skip_existing = forms.BooleanField(
        required=False,
        label='Skip activities already on this server (files exported from here)'
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_tag = False

    def clean_import_file(self):
        import_file = self.cleaned_data['import_file']
        if not import_file.name.lower().endswith('.json'):
            raise forms.ValidationError('File must be a JSON file.')
        return import_file
