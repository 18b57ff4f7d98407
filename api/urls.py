from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .viewsets import (
	AuthViewSet,
	AdminUserViewSet,
	SubjectViewSet,
	SubjectLessonViewSet,
	LessonVideoViewSet,
	FeedViewSet,
	AppTextViewSet,
	LessonRequestViewSet,
	LessonAccessViewSet,
	PaperViewSet,
	QuizViewSet,
	QuizAttemptViewSet,
	QuestionImageViewSet,
	NotificationViewSet,
	AdminDashboardViewSet,
)

router = DefaultRouter()
router.register(r'auth', AuthViewSet, basename='auth')
router.register(r'subjects', SubjectViewSet, basename='subject')
router.register(r'lessons', SubjectLessonViewSet, basename='lesson')
router.register(r'videos', LessonVideoViewSet, basename='video')
router.register(r'feed', FeedViewSet, basename='feed')
router.register(r'app-texts', AppTextViewSet, basename='app-text')
router.register(r'lesson-requests', LessonRequestViewSet, basename='lesson-request')
router.register(r'lesson-access', LessonAccessViewSet, basename='lesson-access')
router.register(r'papers', PaperViewSet, basename='paper')
router.register(r'quizzes', QuizViewSet, basename='quiz')
router.register(r'quiz-attempts', QuizAttemptViewSet, basename='quiz-attempt')
router.register(r'question-images', QuestionImageViewSet, basename='question-image')
router.register(r'notifications', NotificationViewSet, basename='notification')
router.register(r'admin/users', AdminUserViewSet, basename='admin-users')
router.register(r'admin/dashboard', AdminDashboardViewSet, basename='admin-dashboard')

urlpatterns = [
	path('', include(router.urls)),
]
