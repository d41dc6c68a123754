# apps/tasks/forms.py

from django import forms

from apps.core.models import Task, User

EMPTY_ASSIGNEES = 'A task must have at least one assignee.'


class AssigneesField(forms.ModelMultipleChoiceField):
    """List of existing, active user ids"""

    default_error_messages = {
        'required': EMPTY_ASSIGNEES,
        'invalid_list': 'Enter a list of user ids.',
        'invalid_choice': 'User %(value)s does not exist.',
        'invalid_pk_value': '“%(pk)s” is not a valid user id.',
    }

    def __init__(self, **kwargs):
        super().__init__(queryset=User.objects.filter(is_active=True), **kwargs)


class TaskCreateForm(forms.Form):
    """Validates a new task (keys already snake_cased)"""

    title = forms.CharField(min_length=2, max_length=100, strip=True)
    description = forms.CharField(required=False, max_length=1000)
    due_date = forms.DateTimeField()
    priority = forms.ChoiceField(choices=Task.PRIORITY_CHOICES)
    assigned_to_ids = AssigneesField()

    def to_data(self) -> dict:
        data = dict(self.cleaned_data)
        data['assigned_to'] = {user.pk for user in data.pop('assigned_to_ids')}
        return data


class TaskUpdateForm(forms.Form):
    """
    Validates a partial update

    Only keys present in the payload end up in the patch; a present key
    cannot be blanked (description excepted).
    """

    title = forms.CharField(required=False, min_length=2, max_length=100, strip=True)
    description = forms.CharField(required=False, max_length=1000)
    due_date = forms.DateTimeField(required=False)
    priority = forms.ChoiceField(required=False, choices=Task.PRIORITY_CHOICES)
    status = forms.ChoiceField(required=False, choices=Task.STATUS_CHOICES)
    assigned_to_ids = AssigneesField(required=False)

    BLANKABLE = {'description'}

    def clean(self):
        cleaned_data = super().clean()

        for name in self.fields:
            if name in self.BLANKABLE or name not in self.data or name in self.errors:
                continue
            if cleaned_data.get(name) in (None, '') or (
                name == 'assigned_to_ids' and not cleaned_data.get(name)
            ):
                message = EMPTY_ASSIGNEES if name == 'assigned_to_ids' else 'This field cannot be empty.'
                self.add_error(name, message)

        return cleaned_data

    def to_patch(self) -> dict:
        patch = {
            name: self.cleaned_data[name]
            for name in self.fields
            if name in self.data and name in self.cleaned_data
        }
        if 'assigned_to_ids' in patch:
            patch['assigned_to'] = {user.pk for user in patch.pop('assigned_to_ids')}
        return patch

