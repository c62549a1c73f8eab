from django.db import models


class Roles(models.Model):
    ROLE_USER = 'user'
    ROLE_ADMIN = 'admin'

    role_id = models.AutoField(primary_key=True)
    role_name = models.CharField(unique=True, max_length=50)

    class Meta:
        db_table = 'roles'

    def __str__(self):
        return self.role_name


class Users(models.Model):
    user_id = models.AutoField(primary_key=True)
    email = models.CharField(unique=True, max_length=100)
    username = models.CharField(max_length=50)
    password_hash = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    refresh_token = models.TextField(blank=True, null=True)
    roles = models.ManyToManyField(Roles, db_table='user_roles', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.email

    # DRF и django.contrib.auth проверяют эти атрибуты у request.user
    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    @property
    def is_active(self):
        return True

    @property
    def role_names(self):
        return sorted(self.roles.values_list('role_name', flat=True))

    def has_role(self, role_name):
        return self.roles.filter(role_name=role_name).exists()

    @property
    def is_admin(self):
        return self.has_role(Roles.ROLE_ADMIN)
