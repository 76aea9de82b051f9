from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source='full_name', read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True)
    joinDate = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'fullName', 'email', 'role', 'phone', 'profileImage', 'joinDate']


class UserSummarySerializer(serializers.ModelSerializer):
    """Public contact card used when a booking or car resolves its people."""

    fullName = serializers.CharField(source='full_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'fullName', 'email', 'phone']


class SignupSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=150, trim_whitespace=True)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    confirmPassword = serializers.CharField(write_only=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)

    default_error_messages = {
        'password_mismatch': 'Passwords do not match',
    }

    def validate_fullName(self, value):
        if not value.strip():
            raise serializers.ValidationError("Full name is required")
        return value.strip()

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("User already exists with this email")
        return value

    def validate(self, data):
        if data['password'] != data['confirmPassword']:
            self.fail('password_mismatch')
        return data

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            full_name=validated_data['fullName'],
            phone=validated_data.get('phone', ''),
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(
            request=self.context.get('request'),
            email=data['email'].lower(),
            password=data['password'],
        )
        if user is None:
            raise AuthenticationFailed("Invalid credentials")
        data['user'] = user
        return data


class ProfileUpdateSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=150, required=False, allow_blank=True, source='full_name')
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)

    def update(self, instance, validated_data):
        if validated_data.get('full_name'):
            instance.full_name = validated_data['full_name']
        if 'phone' in validated_data:
            instance.phone = validated_data['phone']
        instance.save()
        return instance
