# apps/reviews/views.py
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CommentCreateSerializer, CommentSerializer, CommentUpdateSerializer
from .services import CommentService


class CommentCreateView(APIView):
    """multipart: option_id, content, order_check_id, files"""
    permission_classes = [IsAuthenticatedOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def post(self, request):
        data = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
        data['files'] = request.FILES.getlist('files')
        if not data.get('order_check_id'):
            data.pop('order_check_id', None)
        serializer = CommentCreateSerializer(data=data)
        serializer.is_valid(raise_exception=True)

        comment = CommentService().save(
            request.user.user_id,
            serializer.validated_data['option_id'],
            serializer.validated_data['content'],
            serializer.validated_data.get('files', []),
            order_check_id=serializer.validated_data.get('order_check_id'),
        )
        comment = CommentService().find_by_id(comment.comment_id)
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)


class CommentDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, comment_id):
        return Response(CommentSerializer(CommentService().find_by_id(comment_id)).data)

    def put(self, request, comment_id):
        serializer = CommentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = CommentService().update(comment_id, request.user, serializer.validated_data['content'])
        return Response(CommentSerializer(comment).data)

    patch = put

    def delete(self, request, comment_id):
        CommentService().delete(comment_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductCommentsView(APIView):
    def get(self, request, product_id):
        comments = CommentService().comment_list(product_id)
        if comments is None:
            return Response(None)
        return Response(CommentSerializer(comments, many=True).data)
