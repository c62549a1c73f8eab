from rest_framework import serializers
from .models import CommentFiles, Comments


class CommentFileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommentFiles
        fields = ('file_id', 'uuid', 'file_name', 'file_type', 'file_size')


class CommentSerializer(serializers.ModelSerializer):
    option_id = serializers.IntegerField(read_only=True)
    option_name = serializers.CharField(source='option.option_name', read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    order_check_id = serializers.IntegerField(read_only=True)
    files = CommentFileSerializer(many=True, read_only=True)

    class Meta:
        model = Comments
        fields = (
            'comment_id', 'option_id', 'option_name', 'user_id', 'username',
            'order_check_id', 'content', 'files', 'created_at', 'updated_at',
        )


class CommentCreateSerializer(serializers.Serializer):
    option_id = serializers.IntegerField()
    content = serializers.CharField()
    order_check_id = serializers.IntegerField(required=False, allow_null=True)
    files = serializers.ListField(child=serializers.FileField(allow_empty_file=True), required=False)


class CommentUpdateSerializer(serializers.Serializer):
    content = serializers.CharField()
