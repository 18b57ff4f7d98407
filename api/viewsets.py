import logging
from typing import Iterable

from rest_framework import permissions, viewsets, mixins, status, filters, serializers
from rest_framework.decorators import action
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiExample, OpenApiParameter
from django.db import transaction
from django.db.models import Avg, Count, Exists, OuterRef, Q, Value, BooleanField
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from knox.models import AuthToken

from quizbank.sysutils.constants import UserRole, RequestStatus

from accounts.models import User
from accounts.serializers import UserSerializer, ProfileUpdateSerializer, AdminUserSerializer
from content.models import Subject, SubjectLesson, LessonVideo, AppText
from content.serializers import (
	SubjectSerializer,
	SubjectLessonSerializer,
	LessonVideoSerializer,
	VideoMoveSerializer,
	VideoReorderSerializer,
	FeedSubjectSerializer,
	AppTextSerializer,
	AppTextBulkSerializer,
)
from content import services as content_services
from content import texts as app_texts
from access.models import LessonRequest, UserLessonAccess
from access.serializers import (
	LessonRequestSerializer,
	LessonRequestCreateSerializer,
	ApproveRequestSerializer,
	RejectRequestSerializer,
	UserLessonAccessSerializer,
	GrantAccessSerializer,
)
from access import services as access_services
from access.services import AccessWorkflowError
from quizzes.models import Paper, Quiz, QuizAttempt, QuestionImage
from quizzes.serializers import (
	PaperSerializer,
	QuizSerializer,
	QuizListSerializer,
	AttemptSubmitSerializer,
	QuizAttemptSerializer,
	QuestionImageSerializer,
)
from quizzes.scoring import QuizScoringError
from quizzes.services import submit_attempt, quiz_stats
from notifications.models import Notification
from notifications.serializers import NotificationSerializer, NotificationCreateSerializer, BroadcastSerializer
from notifications import services as notification_services
from .serializers import (
	RegisterSerializer,
	LoginSerializer,
	ChangePasswordSerializer,
	AppTextMapSerializer,
	UnreadCountSerializer,
	QuizStatsSerializer,
	AdminDashboardSerializer,
)

logger = logging.getLogger(__name__)


# ----- Permissions -----
def _user_role_in(user, roles: Iterable[str]) -> bool:
	return bool(user and user.is_authenticated and getattr(user, 'role', None) in roles)


def _is_admin(user) -> bool:
	return _user_role_in(user, {UserRole.ADMIN.value})


class IsAdminRole(permissions.BasePermission):
	"""Allow only ADMIN role users."""

	def has_permission(self, request, view):
		return _is_admin(request.user)


class IsAdminOrReadOnly(permissions.BasePermission):
	"""Reads for any authenticated user, writes for admins."""

	def has_permission(self, request, view):
		if request.method in permissions.SAFE_METHODS:
			return bool(request.user and request.user.is_authenticated)
		return _is_admin(request.user)


def _error(exc) -> Response:
	return Response({"detail": exc.detail}, status=exc.status_code)


class DummySerializer(serializers.Serializer):
	"""Placeholder for schema generation only."""
	id = serializers.CharField(read_only=True)


# ----- Auth -----
class AuthViewSet(viewsets.ViewSet):
	permission_classes = [permissions.AllowAny]
	serializer_class = DummySerializer

	def _token_payload(self, user: User, status_code=200) -> Response:
		token = AuthToken.objects.create(user)[1]
		return Response({"token": token, "user": UserSerializer(user).data}, status=status_code)

	@extend_schema(
		request=RegisterSerializer,
		responses={201: OpenApiResponse(description="Token and user payload")},
		examples=[
			OpenApiExample(
				name="RegisterRequest",
				value={"email": "ada@example.com", "name": "Ada", "password": "secret1", "confirm_password": "secret1"},
			),
		],
	)
	@action(detail=False, methods=['post'], url_path='register')
	def register(self, request):
		'''Create a learner account and log it in.\n
		New accounts always get the "user" role.'''
		ser = RegisterSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		user = User.objects.create_user(
			email=ser.validated_data['email'],
			name=ser.validated_data['name'],
			password=ser.validated_data['password'],
		)
		logger.info("Registered user %s", user.pk)
		return self._token_payload(user, status_code=201)

	@extend_schema(request=LoginSerializer, responses={200: OpenApiResponse(description="Token and user payload")})
	@action(detail=False, methods=['post'], url_path='login')
	def login(self, request):
		'''[email]: account email \n
		[password]: user's password'''
		email = str(request.data.get('email') or '').strip().lower()
		password = request.data.get('password')
		if not email or not password:
			return Response({"detail": "email and password are required."}, status=400)
		user = User.objects.filter(email__iexact=email).first()
		if not user or not user.check_password(password):
			return Response({"detail": "Invalid credentials."}, status=400)
		if not user.is_active:
			return Response({"detail": "Account disabled."}, status=403)
		return self._token_payload(user)

	@extend_schema(request=None, responses={204: OpenApiResponse(description="Token revoked")})
	@action(detail=False, methods=['post'], url_path='logout', permission_classes=[permissions.IsAuthenticated])
	def logout(self, request):
		if request.auth is not None:
			request.auth.delete()
		return Response(status=status.HTTP_204_NO_CONTENT)

	@extend_schema(
		methods=['GET'],
		responses={200: UserSerializer},
	)
	@extend_schema(
		methods=['PATCH'],
		request=ProfileUpdateSerializer,
		responses={200: UserSerializer},
	)
	@action(
		detail=False,
		methods=['get', 'patch'],
		url_path='me',
		permission_classes=[permissions.IsAuthenticated],
		parser_classes=[JSONParser, MultiPartParser, FormParser],
	)
	def me(self, request):
		"""Current user; PATCH updates own name/avatar only."""
		user: User = request.user
		if request.method == 'PATCH':
			ser = ProfileUpdateSerializer(user, data=request.data, partial=True)
			ser.is_valid(raise_exception=True)
			ser.save()
		return Response(UserSerializer(user, context={'request': request}).data)

	@extend_schema(
		description=(
			"Change password for the authenticated user. "
			"Requires current_password, new_password, and confirm_password."
		),
		request=ChangePasswordSerializer,
		responses={200: OpenApiResponse(description="Password changed successfully.")},
		examples=[
			OpenApiExample(
				name="ChangePasswordRequest",
				value={
					"current_password": "oldpass123",
					"new_password": "newpass456",
					"confirm_password": "newpass456",
				},
			),
		],
	)
	@action(detail=False, methods=['post'], url_path='change-password', permission_classes=[permissions.IsAuthenticated])
	def change_password(self, request):
		user: User = request.user
		current = request.data.get('current_password')
		new = request.data.get('new_password')
		confirm = request.data.get('confirm_password')
		if not all([current, new, confirm]):
			return Response({"detail": "current_password, new_password and confirm_password are required."}, status=400)
		if not user.check_password(current):
			return Response({"detail": "Current password is incorrect."}, status=400)
		if new != confirm:
			return Response({"detail": "New password and confirm password do not match."}, status=400)
		if len(new) < 6:
			return Response({"detail": "New password must be at least 6 characters."}, status=400)
		if new == current:
			return Response({"detail": "New password must be different from current password."}, status=400)
		user.set_password(new)
		user.save(update_fields=['password', 'updated_at'])
		return Response({"detail": "Password changed successfully."})


class AdminUserViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.UpdateModelMixin, viewsets.GenericViewSet):
	"""Admin-only access to all users. PATCH changes role or active flag."""

	queryset = User.objects.all().order_by('-created_at')
	serializer_class = AdminUserSerializer
	permission_classes = [permissions.IsAuthenticated, IsAdminRole]
	filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
	filterset_fields = ['role', 'is_active']
	search_fields = ['name', 'email']
	ordering_fields = ['created_at', 'name', 'email', 'role']
	http_method_names = ['get', 'patch', 'head', 'options']

	def perform_update(self, serializer):
		instance: User = serializer.instance
		new_role = serializer.validated_data.get('role', instance.role)
		if instance.pk == self.request.user.pk and new_role != instance.role:
			raise serializers.ValidationError({"role": "You cannot change your own role."})
		user = serializer.save()
		# Django admin site access follows the role
		if user.is_staff != user.is_admin:
			user.is_staff = user.is_admin
			user.save(update_fields=['is_staff', 'updated_at'])
		logger.info("User %s updated by admin %s (role=%s, active=%s)", user.pk, self.request.user.pk, user.role, user.is_active)


# ----- Content -----
class SubjectViewSet(viewsets.ModelViewSet):
	queryset = Subject.objects.all()
	serializer_class = SubjectSerializer
	permission_classes = [IsAdminOrReadOnly]
	filter_backends = [filters.SearchFilter, filters.OrderingFilter]
	search_fields = ['name', 'description']
	ordering_fields = ['name', 'created_at']

	def get_queryset(self):
		return Subject.objects.annotate(lesson_count=Count('lessons', distinct=True)).order_by('created_at')

	def perform_create(self, serializer):
		serializer.save(created_by=self.request.user)


class SubjectLessonViewSet(viewsets.ModelViewSet):
	"""Lesson catalogue. Everyone sees titles; ``has_access`` tells learners
	whether the lesson's videos are open to them."""

	queryset = SubjectLesson.objects.select_related('subject')
	serializer_class = SubjectLessonSerializer
	permission_classes = [IsAdminOrReadOnly]
	filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
	filterset_fields = ['subject']
	search_fields = ['title', 'description']
	ordering_fields = ['created_at', 'title']

	def get_queryset(self):
		qs = super().get_queryset().annotate(video_count=Count('videos', distinct=True)).order_by('created_at')
		user = self.request.user
		if _is_admin(user):
			return qs.annotate(has_access=Value(True, output_field=BooleanField()))
		grants = access_services.active_grants().filter(user_id=user.pk, lesson_id=OuterRef('pk'))
		return qs.annotate(has_access=Exists(grants))

	def perform_create(self, serializer):
		serializer.save(created_by=self.request.user)

	def perform_update(self, serializer):
		with transaction.atomic():
			lesson = serializer.save()
			moved = content_services.sync_video_subjects(lesson) + access_services.sync_lesson_subject(lesson)
		if moved:
			logger.info("Lesson %s moved to subject %s (%s rows updated)", lesson.pk, lesson.subject_id, moved)

	@extend_schema(responses={200: LessonVideoSerializer(many=True)})
	@action(detail=True, methods=['get'], url_path='videos')
	def videos(self, request, pk=None):
		"""Videos of one lesson in display order. Requires an active grant."""
		lesson = self.get_object()
		if not access_services.has_active_access(request.user, lesson):
			return Response({"detail": "Request access to this lesson first."}, status=403)
		qs = LessonVideo.objects.filter(lesson=lesson).order_by('position', 'created_at')
		return Response(LessonVideoSerializer(qs, many=True).data)


class LessonVideoViewSet(viewsets.ModelViewSet):
	queryset = LessonVideo.objects.select_related('lesson', 'subject')
	serializer_class = LessonVideoSerializer
	permission_classes = [IsAdminOrReadOnly]
	filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
	filterset_fields = ['lesson', 'subject']
	search_fields = ['title', 'description']
	ordering_fields = ['position', 'created_at']
	ordering = ['lesson', 'position']

	def get_queryset(self):
		qs = super().get_queryset()
		lesson_ids = access_services.active_lesson_ids_for(self.request.user)
		if lesson_ids is None:
			return qs
		return qs.filter(lesson_id__in=lesson_ids)

	def perform_create(self, serializer):
		lesson = serializer.validated_data['lesson']
		with transaction.atomic():
			# Serialise concurrent appends to the same lesson
			SubjectLesson.objects.select_for_update().filter(pk=lesson.pk).first()
			serializer.save(created_by=self.request.user, position=content_services.next_position(lesson))

	def perform_destroy(self, instance):
		content_services.delete_video(instance)

	@extend_schema(request=VideoMoveSerializer, responses={200: LessonVideoSerializer(many=True)})
	@action(detail=True, methods=['post'], url_path='move')
	def move(self, request, pk=None):
		"""Move a video one slot up or down. Returns the lesson's videos in order."""
		video = self.get_object()
		ser = VideoMoveSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			videos = content_services.move_video(video, ser.validated_data['direction'])
		except content_services.VideoOrderError as exc:
			return Response({"detail": str(exc)}, status=400)
		return Response(LessonVideoSerializer(videos, many=True).data)

	@extend_schema(
		request=VideoReorderSerializer,
		responses={200: LessonVideoSerializer(many=True)},
		examples=[
			OpenApiExample(
				name="ReorderRequest",
				value={"lesson": "0b7d…", "video_ids": ["3f1a…", "9c2e…", "77d0…"]},
			),
		],
	)
	@action(detail=False, methods=['post'], url_path='reorder')
	def reorder(self, request):
		"""Set the full order of a lesson's videos in one call."""
		ser = VideoReorderSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			videos = content_services.reorder_videos(ser.validated_data['lesson'], ser.validated_data['video_ids'])
		except content_services.VideoOrderError as exc:
			return Response({"detail": str(exc)}, status=400)
		return Response(LessonVideoSerializer(videos, many=True).data)


class FeedViewSet(viewsets.ViewSet):
	permission_classes = [permissions.IsAuthenticated]
	serializer_class = FeedSubjectSerializer

	@extend_schema(
		description=(
			"Subjects with their lessons and ordered videos. Admins see every "
			"lesson; learners only lessons they hold an active grant for."
		),
		responses={200: FeedSubjectSerializer(many=True)},
	)
	def list(self, request):
		lesson_ids = access_services.active_lesson_ids_for(request.user)
		qs = content_services.feed_queryset(lesson_ids)
		return Response(FeedSubjectSerializer(qs, many=True).data)


class AppTextViewSet(viewsets.ModelViewSet):
	queryset = AppText.objects.all()
	serializer_class = AppTextSerializer
	permission_classes = [IsAdminOrReadOnly]
	filter_backends = [filters.SearchFilter]
	search_fields = ['key', 'value']

	def perform_create(self, serializer):
		serializer.save(created_by=self.request.user)
		app_texts.invalidate()

	def perform_update(self, serializer):
		serializer.save()
		app_texts.invalidate()

	def perform_destroy(self, instance):
		instance.delete()
		app_texts.invalidate()

	@extend_schema(responses={200: OpenApiResponse(response=AppTextMapSerializer, description="{key: value} map")})
	@action(detail=False, methods=['get'], url_path='map')
	def text_map(self, request):
		return Response(app_texts.text_map())

	@extend_schema(
		request=AppTextBulkSerializer,
		responses={200: OpenApiResponse(description="Updated {key: value} map")},
		examples=[OpenApiExample(name="BulkTexts", value={"texts": {"hero_title": "Welcome back"}})],
	)
	@action(detail=False, methods=['post'], url_path='bulk')
	def bulk(self, request):
		ser = AppTextBulkSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		return Response(app_texts.upsert_texts(ser.validated_data['texts'], user=request.user))


# ----- Lesson access workflow -----
class LessonRequestViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
	queryset = LessonRequest.objects.select_related('user', 'lesson', 'subject', 'reviewed_by')
	serializer_class = LessonRequestSerializer
	permission_classes = [permissions.IsAuthenticated]
	filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
	filterset_fields = ['status', 'user', 'lesson', 'subject']
	search_fields = ['user__name', 'user__email', 'lesson__title']
	ordering_fields = ['requested_at', 'reviewed_at']

	def get_permissions(self):
		if self.action in ['approve', 'reject']:
			return [permissions.IsAuthenticated(), IsAdminRole()]
		return [permissions.IsAuthenticated()]

	def get_queryset(self):
		qs = super().get_queryset()
		if _is_admin(self.request.user):
			return qs
		return qs.filter(user=self.request.user)

	@extend_schema(
		request=LessonRequestCreateSerializer,
		responses={
			201: LessonRequestSerializer,
			409: OpenApiResponse(description="Pending request or active grant already exists"),
		},
	)
	def create(self, request, *args, **kwargs):
		ser = LessonRequestCreateSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			req = access_services.submit_request(request.user, ser.validated_data['lesson'], ser.validated_data.get('message', ''))
		except AccessWorkflowError as exc:
			return _error(exc)
		return Response(LessonRequestSerializer(req).data, status=201)

	@extend_schema(
		request=ApproveRequestSerializer,
		responses={
			200: LessonRequestSerializer,
			409: OpenApiResponse(description="Request already reviewed"),
		},
		examples=[
			OpenApiExample(name="ApproveFor30Days", value={"duration_days": 30, "admin_notes": "Enjoy"}),
			OpenApiExample(name="ApproveNoExpiry", value={}),
		],
	)
	@action(detail=True, methods=['post'])
	def approve(self, request, pk=None):
		req = self.get_object()
		ser = ApproveRequestSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			req = access_services.approve_request(
				req,
				request.user,
				expires_at=ser.validated_data.get('expires_at'),
				duration_days=ser.validated_data.get('duration_days'),
				admin_notes=ser.validated_data.get('admin_notes', ''),
			)
		except AccessWorkflowError as exc:
			return _error(exc)
		return Response(LessonRequestSerializer(req).data)

	@extend_schema(
		request=RejectRequestSerializer,
		responses={
			200: LessonRequestSerializer,
			409: OpenApiResponse(description="Request already reviewed"),
		},
	)
	@action(detail=True, methods=['post'])
	def reject(self, request, pk=None):
		req = self.get_object()
		ser = RejectRequestSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			req = access_services.reject_request(req, request.user, admin_notes=ser.validated_data.get('admin_notes', ''))
		except AccessWorkflowError as exc:
			return _error(exc)
		return Response(LessonRequestSerializer(req).data)


class LessonAccessViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
	queryset = UserLessonAccess.objects.select_related('user', 'lesson', 'subject', 'granted_by')
	serializer_class = UserLessonAccessSerializer
	permission_classes = [permissions.IsAuthenticated]
	filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
	filterset_fields = ['user', 'lesson', 'subject']
	ordering_fields = ['granted_at', 'expires_at']

	def get_permissions(self):
		if self.action in ['destroy', 'grant', 'expire']:
			return [permissions.IsAuthenticated(), IsAdminRole()]
		return [permissions.IsAuthenticated()]

	def get_queryset(self):
		qs = super().get_queryset()
		if _is_admin(self.request.user):
			active = self.request.query_params.get('active')
			if active in ('1', 'true'):
				return qs.filter(pk__in=access_services.active_grants().values('pk'))
			return qs
		return qs.filter(user=self.request.user)

	def perform_destroy(self, instance):
		access_services.revoke_access(instance, self.request.user)

	@extend_schema(request=GrantAccessSerializer, responses={201: UserLessonAccessSerializer})
	@action(detail=False, methods=['post'])
	def grant(self, request):
		"""Grant (or refresh) access directly without a request."""
		ser = GrantAccessSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			grant = access_services.grant_access(
				ser.validated_data['user'],
				ser.validated_data['lesson'],
				request.user,
				expires_at=ser.validated_data.get('expires_at'),
				duration_days=ser.validated_data.get('duration_days'),
			)
		except AccessWorkflowError as exc:
			return _error(exc)
		return Response(UserLessonAccessSerializer(grant).data, status=201)

	@extend_schema(
		parameters=[OpenApiParameter(name='lesson', required=True, type=str, description='Lesson id')],
		responses={200: OpenApiResponse(description='{"lesson": id, "has_access": bool}')},
	)
	@action(detail=False, methods=['get'])
	def check(self, request):
		lesson = get_object_or_404(SubjectLesson, pk=request.query_params.get('lesson'))
		return Response({
			"lesson": str(lesson.pk),
			"has_access": access_services.has_active_access(request.user, lesson),
		})

	@extend_schema(request=None, responses={200: OpenApiResponse(description='{"expired": n}')})
	@action(detail=False, methods=['post'])
	def expire(self, request):
		"""Remove every grant whose expiry has passed."""
		removed = access_services.expire_access()
		return Response({"expired": len(removed)})


# ----- Quizzes -----
class PaperViewSet(viewsets.ModelViewSet):
	queryset = Paper.objects.all()
	serializer_class = PaperSerializer
	permission_classes = [IsAdminOrReadOnly]
	filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
	filterset_fields = ['difficulty', 'access_level', 'year', 'subject']
	search_fields = ['title', 'description', 'subject']
	ordering_fields = ['created_at', 'year', 'title']

	def get_queryset(self):
		return Paper.objects.annotate(quiz_count=Count('quizzes')).order_by('-created_at')

	def perform_create(self, serializer):
		serializer.save(created_by=self.request.user)


class QuizViewSet(viewsets.ModelViewSet):
	queryset = Quiz.objects.select_related('paper')
	serializer_class = QuizSerializer
	permission_classes = [IsAdminOrReadOnly]
	filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
	filterset_fields = ['difficulty', 'category', 'paper']
	search_fields = ['title', 'description', 'category']
	ordering_fields = ['created_at', 'title', 'time_limit']

	def get_permissions(self):
		if self.action == 'submit':
			return [permissions.IsAuthenticated()]
		if self.action == 'stats':
			return [permissions.IsAuthenticated(), IsAdminRole()]
		return [IsAdminOrReadOnly()]

	def get_serializer_class(self):
		if self.action == 'list':
			return QuizListSerializer
		return super().get_serializer_class()

	def perform_create(self, serializer):
		serializer.save(created_by=self.request.user)

	@extend_schema(
		request=AttemptSubmitSerializer,
		responses={201: QuizAttemptSerializer, 400: OpenApiResponse(description="Answer sheet does not fit the quiz")},
		examples=[
			OpenApiExample(name="SubmitAttempt", value={"answers": {"q1": 2, "q2": None}, "time_spent": 540}),
		],
	)
	@action(detail=True, methods=['post'])
	def submit(self, request, pk=None):
		"""Score an answer sheet and store the attempt.

		Answers are marked on the server; time beyond the quiz limit is
		clamped and the attempt flagged ``timed_out``.
		"""
		quiz = self.get_object()
		ser = AttemptSubmitSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		try:
			attempt = submit_attempt(request.user, quiz, ser.validated_data['answers'], ser.validated_data['time_spent'])
		except QuizScoringError as exc:
			return Response({"detail": str(exc)}, status=400)
		return Response(QuizAttemptSerializer(attempt).data, status=201)

	@extend_schema(responses={200: QuizStatsSerializer})
	@action(detail=True, methods=['get'])
	def stats(self, request, pk=None):
		return Response(quiz_stats(self.get_object()))


class QuizAttemptViewSet(viewsets.ReadOnlyModelViewSet):
	queryset = QuizAttempt.objects.select_related('user', 'quiz')
	serializer_class = QuizAttemptSerializer
	permission_classes = [permissions.IsAuthenticated]
	filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
	filterset_fields = ['quiz', 'user', 'passed']
	ordering_fields = ['completed_at', 'percentage']

	def get_queryset(self):
		qs = super().get_queryset()
		if _is_admin(self.request.user):
			return qs
		return qs.filter(user=self.request.user)


class QuestionImageViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
	queryset = QuestionImage.objects.all()
	serializer_class = QuestionImageSerializer
	permission_classes = [permissions.IsAuthenticated, IsAdminRole]
	parser_classes = [MultiPartParser, FormParser]

	def perform_create(self, serializer):
		serializer.save(uploaded_by=self.request.user)


# ----- Notifications -----
class NotificationViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
	queryset = Notification.objects.all()
	serializer_class = NotificationSerializer
	permission_classes = [permissions.IsAuthenticated]
	filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
	filterset_fields = ['read_status', 'type', 'priority']
	ordering_fields = ['created_at']

	def get_permissions(self):
		if self.action in ['create', 'broadcast']:
			return [permissions.IsAuthenticated(), IsAdminRole()]
		return [permissions.IsAuthenticated()]

	def get_queryset(self):
		# Own notifications only, admins included
		return Notification.objects.filter(user=self.request.user).order_by('-created_at')

	@extend_schema(request=NotificationCreateSerializer, responses={201: NotificationSerializer})
	def create(self, request, *args, **kwargs):
		ser = NotificationCreateSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		data = ser.validated_data
		notification = notification_services.notify(
			data['user'], data['type'], data['title'], data['message'],
			data=data.get('data'), priority=data['priority'],
		)
		return Response(NotificationSerializer(notification).data, status=201)

	@extend_schema(request=BroadcastSerializer, responses={201: OpenApiResponse(description='{"sent": n}')})
	@action(detail=False, methods=['post'])
	def broadcast(self, request):
		ser = BroadcastSerializer(data=request.data)
		ser.is_valid(raise_exception=True)
		data = ser.validated_data
		created = notification_services.broadcast(data['title'], data['message'], priority=data['priority'], data=data.get('data'))
		return Response({"sent": len(created)}, status=201)

	@extend_schema(responses={200: NotificationSerializer(many=True)})
	@action(detail=False, methods=['get'])
	def toasts(self, request):
		"""Most recent unread notifications for the client to pop up."""
		return Response(NotificationSerializer(notification_services.toasts_for(request.user), many=True).data)

	@extend_schema(responses={200: UnreadCountSerializer})
	@action(detail=False, methods=['get'], url_path='unread-count')
	def unread_count(self, request):
		return Response({"unread": notification_services.unread_for(request.user).count()})

	@extend_schema(request=None, responses={200: NotificationSerializer})
	@action(detail=True, methods=['post'], url_path='mark-read')
	def mark_read(self, request, pk=None):
		notification = self.get_object()
		if not notification.read_status:
			notification.read_status = True
			notification.save(update_fields=['read_status'])
		return Response(NotificationSerializer(notification).data)

	@extend_schema(request=None, responses={200: OpenApiResponse(description='{"updated": n}')})
	@action(detail=False, methods=['post'], url_path='mark-all-read')
	def mark_all_read(self, request):
		return Response({"updated": notification_services.mark_all_read(request.user)})


# ----- Admin dashboard -----
class AdminDashboardViewSet(viewsets.ViewSet):
	"""Admin dashboard endpoints exposed under /admin/dashboard/."""

	permission_classes = [permissions.IsAuthenticated, IsAdminRole]
	serializer_class = AdminDashboardSerializer

	@extend_schema(
		operation_id="admin_dashboard",
		description="Platform-wide counts for the admin overview.",
		responses={200: AdminDashboardSerializer},
	)
	def list(self, request):
		users = User.objects.aggregate(
			total=Count('id'),
			admins=Count('id', filter=Q(role=UserRole.ADMIN.value)),
		)
		attempts = QuizAttempt.objects.aggregate(total=Count('id'), avg=Avg('percentage'))
		payload = {
			"users": users['total'],
			"admins": users['admins'],
			"subjects": Subject.objects.count(),
			"lessons": SubjectLesson.objects.count(),
			"videos": LessonVideo.objects.count(),
			"papers": Paper.objects.count(),
			"quizzes": Quiz.objects.count(),
			"attempts": attempts['total'],
			"average_percentage": round(attempts['avg'] or 0, 2),
			"pending_requests": LessonRequest.objects.filter(status=RequestStatus.PENDING.value).count(),
			"active_grants": access_services.active_grants().count(),
			"unread_notifications": Notification.objects.filter(read_status=False).count(),
		}
		return Response(payload)
