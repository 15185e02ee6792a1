# forms.py
from django import forms

from .models import Node, NodeType
from .signals import node_form_building, node_type_form_building, node_type_saved, node_validating


class NodeTypeForm(forms.ModelForm):
    class Meta:
        model = NodeType
        fields = ['type', 'name', 'description']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Article'}),
            'description': forms.Textarea(attrs={'rows': 3, 'class': 'form-control'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        node_type = None if self.instance._state.adding else self.instance
        if node_type is not None:
            # The machine name is the key extensions store settings under
            self.fields['type'].disabled = True

        # Let extensions add their own settings controls
        node_type_form_building.send(sender=self.__class__, form=self, node_type=node_type)

    def save(self, commit=True):
        node_type = super().save(commit=commit)
        if commit:
            node_type_saved.send(sender=NodeType, node_type=node_type, cleaned_data=self.cleaned_data)
        return node_type


class NodeForm(forms.Form):
    title = forms.CharField(max_length=255, widget=forms.TextInput(attrs={'class': 'form-control'}))
    body = forms.CharField(required=False, widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 8}))
    revision = forms.BooleanField(required=False, initial=True, label="Create new revision")

    def __init__(self, *args, node_type, node=None, item=None, **kwargs):
        self.node_type = node_type
        self.node = node
        self.item = item
        super().__init__(*args, **kwargs)

        if item is not None:
            self.fields['title'].initial = item.title
            self.fields['body'].initial = item.body

        node_form_building.send(sender=self.__class__, form=self, node_type=node_type, item=item)

    def build_item(self):
        """The submitted values as a content item of this form's node."""
        node = self.node or Node(type=self.node_type)
        return node.as_item(values=self.cleaned_data)

    def clean(self):
        cleaned_data = super().clean()
        node_validating.send(sender=self.__class__, form=self, item=self.build_item())
        return cleaned_data

    def save(self):
        node = self.node or Node(type=self.node_type)
        item = node.save_revision(self.cleaned_data, new_revision=self.cleaned_data.get('revision', True))
        return node, item
