# apps/core/forms.py

from django import forms

from .models import VerificationRecord


class RegisterForm(forms.Form):
    """Registration request (the account only exists after verification)"""

    name = forms.CharField(min_length=2, max_length=50, strip=True)
    email = forms.EmailField(max_length=254)
    password = forms.CharField(min_length=6, strip=False)


class VerifyOtpForm(forms.Form):

    email = forms.EmailField(max_length=254)
    otp = forms.RegexField(regex=r'^\d{6}$', error_messages={'invalid': 'Enter the 6-digit code.'})
    purpose = forms.ChoiceField(required=False, choices=VerificationRecord.PURPOSE_CHOICES)

    def clean_purpose(self):
        return self.cleaned_data.get('purpose') or VerificationRecord.PURPOSE_REGISTER


class EmailForm(forms.Form):
    """Resend-code and forgot-password requests"""

    email = forms.EmailField(max_length=254)


class LoginForm(forms.Form):

    email = forms.EmailField(max_length=254)
    password = forms.CharField(strip=False)


class ResetPasswordForm(forms.Form):

    email = forms.EmailField(max_length=254)
    otp = forms.RegexField(regex=r'^\d{6}$', error_messages={'invalid': 'Enter the 6-digit code.'})
    new_password = forms.CharField(min_length=6, strip=False)


class ProfileForm(forms.Form):

    name = forms.CharField(min_length=2, max_length=50, strip=True)
