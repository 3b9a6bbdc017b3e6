from rest_framework import permissions


class IsPharmacyAdmin(permissions.BasePermission):
    """Only pharmacy admins may call the view"""
    message = 'Only pharmacy admins can perform this action'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_pharmacy_admin)


class IsPharmacyAdminOrReadOnly(IsPharmacyAdmin):
    """
    Any authenticated user can read; writes are reserved to pharmacy admins.
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)
