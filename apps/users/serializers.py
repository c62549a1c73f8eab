from rest_framework import serializers
from .models import Users


class UserSerializer(serializers.ModelSerializer):
    roles = serializers.SerializerMethodField()

    class Meta:
        model = Users
        fields = ('user_id', 'email', 'username', 'phone_number', 'roles', 'created_at')

    def get_roles(self, obj):
        return obj.role_names


class JoinSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=100)
    password = serializers.CharField(min_length=6, write_only=True)
    username = serializers.CharField(max_length=50)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True)


class UserInfoSerializer(serializers.Serializer):
    email = serializers.CharField()
    username = serializers.CharField()
