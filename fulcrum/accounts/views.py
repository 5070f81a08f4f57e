import logging

from django.contrib import messages
from django.contrib.auth import login, logout, update_session_auth_hash
from django.contrib.auth import views as auth_views
from django.contrib.auth.mixins import LoginRequiredMixin
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.generic import CreateView, TemplateView

from .forms import ChangePasswordForm, LoginForm, ProfileForm, SignupForm

logger = logging.getLogger('fulcrum.accounts')


def client_ip(request):
    """Best-effort client address for audit logging."""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '').split(',')[0].strip()
    return forwarded or request.META.get('REMOTE_ADDR')


class LoginView(auth_views.LoginView):
    """
    Email login with "remember me" support.

    Always lands on the activity list after a successful sign in.
    """

    template_name = 'accounts/login.html'
    authentication_form = LoginForm
    redirect_authenticated_user = True

    def get_success_url(self):
        return reverse_lazy('activities:activity_list')

    def form_valid(self, form):
        response = super().form_valid(form)

        # Without "remember me" the session ends with the browser
        if form.cleaned_data.get('remember_me'):
            self.request.session.set_expiry(None)
        else:
            self.request.session.set_expiry(0)

        logger.info("User logged in: %s (%s)", self.request.user.email, client_ip(self.request))
        messages.success(self.request, 'Signed in successfully')
        return response

    def form_invalid(self, form):
        logger.warning(
            "Failed login attempt for: %s (%s)",
            form.data.get('username', 'unknown'), client_ip(self.request)
        )
        return super().form_invalid(form)


class SignupView(CreateView):
    """Create an account and sign straight in."""

    form_class = SignupForm
    template_name = 'accounts/signup.html'
    success_url = reverse_lazy('activities:activity_list')

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            return redirect(self.success_url)
        return super().dispatch(request, *args, **kwargs)

    def form_valid(self, form):
        response = super().form_valid(form)
        login(self.request, self.object, backend='django.contrib.auth.backends.ModelBackend')
        logger.info("Account created: %s (%s)", self.object.email, client_ip(self.request))
        messages.success(self.request, 'Account created successfully')
        return response


class LogoutView(TemplateView):
    """
    GET shows a confirmation page, POST performs the logout.
    """

    template_name = 'accounts/logout_confirm.html'

    def get(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect('accounts:login')
        return super().get(request, *args, **kwargs)

    def post(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            logger.info("User logged out: %s (%s)", request.user.email, client_ip(request))
        logout(request)
        messages.info(request, 'You have been signed out.')
        return redirect('accounts:login')


class SettingsView(LoginRequiredMixin, TemplateView):
    """
    Account settings: profile details and password change on one page.

    Each form posts back here with a ``form`` discriminator so only the
    submitted one is validated.
    """

    template_name = 'accounts/settings.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.setdefault('profile_form', ProfileForm(instance=self.request.user))
        context.setdefault('password_form', ChangePasswordForm(user=self.request.user))
        return context

    def post(self, request, *args, **kwargs):
        if request.POST.get('form') == 'password':
            return self._change_password(request)
        return self._update_profile(request)

    def _update_profile(self, request):
        form = ProfileForm(request.POST, instance=request.user)
        if form.is_valid():
            form.save()
            messages.success(request, 'Profile updated successfully')
            return redirect('accounts:settings')
        messages.error(request, 'Please correct the errors below.')
        return self.render_to_response(self.get_context_data(profile_form=form))

    def _change_password(self, request):
        form = ChangePasswordForm(user=request.user, data=request.POST)
        if form.is_valid():
            user = form.save()
            update_session_auth_hash(request, user)
            logger.info("Password changed: %s", user.email)
            messages.success(request, 'Password changed successfully')
            return redirect('accounts:settings')
        messages.error(request, 'Please correct the errors below.')
        return self.render_to_response(self.get_context_data(password_form=form))
