from rest_framework.permissions import BasePermission, SAFE_METHODS

# =====================================================
# Role Permissions
# =====================================================

class IsAdmin(BasePermission):
    """
    Allows access only to users with role ADMIN (or Django staff)
    """
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.is_admin or request.user.is_staff


class IsAdminOrReadOnly(BasePermission):
    """
    Anyone may read; only admins may write. Used by the catalog.
    """
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return IsAdmin().has_permission(request, view)
