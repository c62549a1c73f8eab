# api/views.py
import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.users.serializers import JoinSerializer, LoginSerializer, UserInfoSerializer, UserSerializer
from apps.users.services import UserService
from .authentication import get_raw_token_from_request
from .permissions import IsAdmin

logger = logging.getLogger(__name__)


class JoinView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = JoinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService().join(serializer.validated_data)
        return Response({
            "message": "Регистрация успешна",
            "user_id": user.user_id,
            "email": user.email,
        }, status=status.HTTP_201_CREATED)


class JoinAdminView(APIView):
    """Регистрация администратора, доступна только администраторам"""
    permission_classes = [IsAdmin]

    def post(self, request):
        serializer = JoinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService().join_admin(serializer.validated_data)
        return Response({
            "message": "Администратор зарегистрирован",
            "user_id": user.user_id,
            "email": user.email,
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        response = Response()
        access, refresh = UserService().login(
            serializer.validated_data['email'],
            serializer.validated_data['password'],
            response,
            request=request,
        )
        response.data = {"access": access, "refresh": refresh}
        return response


class TokenRefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        response = Response()
        access = UserService().refresh(request.data.get('refresh'), response)
        response.data = {"access": access}
        return response


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        response = Response()
        redirect_to = UserService().logout(
            request.user.user_id,
            get_raw_token_from_request(request),
            response,
        )
        response.data = {"redirect": redirect_to}
        return response


class CheckEmailView(APIView):
    """409, если email уже занят"""
    permission_classes = [AllowAny]

    def get(self, request):
        UserService().check_email(request.query_params.get('email'))
        return Response({"available": True})


class UserInfoView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = UserInfoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService().get_user_info(
            serializer.validated_data['email'],
            serializer.validated_data['username'],
        )
        return Response(UserSerializer(user).data)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)
