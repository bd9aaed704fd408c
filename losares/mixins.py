from django.conf import settings
from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin


class DashboardAccessMixin(LoginRequiredMixin, UserPassesTestMixin):
    """Restrict the dashboard API to staff or members of the allowed role groups."""

    raise_exception = True

    def test_func(self):
        user = self.request.user
        if not user or not user.is_authenticated:
            return False
        if getattr(user, "is_superuser", False) or getattr(user, "is_staff", False):
            return True
        allowed_roles = getattr(settings, "DASHBOARD_ALLOWED_ROLES", ())
        if not allowed_roles:
            return False
        return user.groups.filter(name__in=allowed_roles).exists()
