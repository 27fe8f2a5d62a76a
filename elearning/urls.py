"""
E-Learning Application URL Configuration

This module defines the complete URL routing structure for the E-Learning application.
Each functional area (users, courses, lessons, quizzes, live sessions,
certificates, affiliates, staff) has its own URL namespace.

URL Structure:
- /api/elearning/token/: Authentication endpoints (JWT token management)
- /api/elearning/users/: Registration, logout and the own account
- /api/elearning/courses/: Course catalogue, progress and certificates
- /api/elearning/lessons/: Lesson content, completion and video progress
- /api/elearning/quizzes/: Quiz retrieval and submission
- /api/elearning/live/: Live Q&A sessions, RSVPs, questions and upvotes
- /api/elearning/certificates/: Public certificate verification
- /api/elearning/affiliates/: Referral tracking and affiliate dashboard
- /api/elearning/admin/: Staff actions (IsAdminUser)

Author: DSP Development Team
Version: 1.0.0
"""

from typing import List
from django.urls import path, include, URLPattern
from rest_framework_simplejwt.views import TokenVerifyView

# Import der Views
from .users import views as user_views
from .modules import views as module_views
from .lessons import views as lesson_views
from .quizzes import views as quiz_views
from .live import views as live_views
from .certificates import views as certificate_views
from .affiliates import views as affiliate_views
from .administration import views as admin_views

app_name = 'elearning'

# --- User Management URL Patterns ---

users_urlpatterns: List[URLPattern] = [
    path('register/', user_views.ExternalUserRegistrationView.as_view(), name='register'),
    path('logout/', user_views.LogoutView.as_view(), name='logout'),
    path('me/', user_views.CurrentUserView.as_view(), name='me'),
]

# --- Courses URL Patterns ---

courses_urlpatterns: List[URLPattern] = [
    # Public course endpoints (no authentication required)
    path('', module_views.CourseListViewPublic.as_view(), name='course-list'),
    path('<int:pk>/', module_views.CourseDetailViewPublic.as_view(), name='course-detail'),

    # Student endpoints (authentication required)
    path('<int:pk>/progress/', module_views.StudentProgressView.as_view(), name='course-progress'),
    path('<int:pk>/certificate/', certificate_views.ClaimCertificateView.as_view(), name='course-certificate'),
]

# --- Lesson URL Patterns ---

lessons_urlpatterns: List[URLPattern] = [
    path('<int:pk>/', lesson_views.LessonDetailView.as_view(), name='lesson-detail'),
    path('<int:pk>/complete/', lesson_views.MarkLessonCompleteView.as_view(), name='lesson-complete'),
    path('<int:pk>/video-progress/', lesson_views.VideoProgressView.as_view(), name='lesson-video-progress'),
]

# --- Quiz URL Patterns ---

quizzes_urlpatterns: List[URLPattern] = [
    path('<int:pk>/', quiz_views.QuizDetailView.as_view(), name='quiz-detail'),
    path('<int:pk>/submit/', quiz_views.SubmitQuizView.as_view(), name='quiz-submit'),
]

# --- Live Session URL Patterns ---

live_urlpatterns: List[URLPattern] = [
    path('sessions/', live_views.LiveSessionListView.as_view(), name='session-list'),
    path('sessions/<int:pk>/', live_views.LiveSessionDetailView.as_view(), name='session-detail'),
    path('sessions/<int:pk>/rsvp/', live_views.LiveSessionRSVPView.as_view(), name='session-rsvp'),
    path('sessions/<int:pk>/questions/', live_views.LiveQuestionCreateView.as_view(), name='session-questions'),
    path('questions/<int:pk>/upvote/', live_views.LiveQuestionUpvoteView.as_view(), name='question-upvote'),
]

# --- Certificate URL Patterns ---

certificates_urlpatterns: List[URLPattern] = [
    path('<str:code>/verify/', certificate_views.VerifyCertificateView.as_view(), name='certificate-verify'),
]

# --- Affiliate URL Patterns ---

affiliates_urlpatterns: List[URLPattern] = [
    path('track/', affiliate_views.AffiliateTrackView.as_view(), name='affiliate-track'),
    path('apply/', affiliate_views.AffiliateApplyView.as_view(), name='affiliate-apply'),
    path('me/', affiliate_views.AffiliateDashboardView.as_view(), name='affiliate-me'),
]

# --- Staff URL Patterns ---

admin_urlpatterns: List[URLPattern] = [
    # Student support
    path('students/<int:user_id>/courses/<int:course_id>/progress/', admin_views.StudentCourseProgressAdminView.as_view(), name='student-progress'),
    path('students/<int:user_id>/modules/<int:module_id>/unlock/', admin_views.UnlockModuleView.as_view(), name='student-unlock-module'),
    path('students/<int:user_id>/modules/<int:module_id>/complete/', admin_views.CompleteModuleView.as_view(), name='student-complete-module'),
    path('students/<int:user_id>/quizzes/<int:quiz_id>/reset/', admin_views.ResetQuizView.as_view(), name='student-reset-quiz'),
    path('students/<int:user_id>/courses/<int:course_id>/reset-progress/', admin_views.ResetProgressView.as_view(), name='student-reset-progress'),
    path('students/<int:user_id>/courses/<int:course_id>/certificate/', admin_views.GrantCertificateView.as_view(), name='student-grant-certificate'),

    path('students/<int:user_id>/notes/', admin_views.StudentNotesView.as_view(), name='student-notes'),
    path('notes/<int:note_id>/', admin_views.AdminNoteDeleteView.as_view(), name='note-delete'),

    # Catalogue
    path('courses/<int:course_id>/passing-score/', admin_views.CoursePassingScoreView.as_view(), name='course-passing-score'),

    # Affiliate program
    path('affiliates/<int:affiliate_id>/status/', admin_views.AffiliateStatusView.as_view(), name='affiliate-status'),
    path('payouts/', admin_views.PayoutCreateView.as_view(), name='payout-create'),
    path('payouts/<int:payout_id>/mark-paid/', admin_views.PayoutMarkPaidView.as_view(), name='payout-mark-paid'),

    # Live sessions
    path('live-sessions/', admin_views.LiveSessionCreateView.as_view(), name='live-session-create'),
    path('live-sessions/<int:session_id>/replay/', admin_views.LiveSessionReplayView.as_view(), name='live-session-replay'),
    path('live-questions/<int:question_id>/status/', admin_views.LiveQuestionStatusView.as_view(), name='live-question-status'),

    # Audit trail
    path('audit-log/', admin_views.AuditLogListView.as_view(), name='audit-log'),
]

# --- Main URL Configuration for E-Learning Application ---

urlpatterns: List[URLPattern] = [
    # Authentication endpoints (JWT token management)
    path('token/', user_views.CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', user_views.CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # Functional area URL includes with proper namespacing
    path('users/', include((users_urlpatterns, 'users'))),
    path('courses/', include((courses_urlpatterns, 'courses'))),
    path('lessons/', include((lessons_urlpatterns, 'lessons'))),
    path('quizzes/', include((quizzes_urlpatterns, 'quizzes'))),
    path('live/', include((live_urlpatterns, 'live'))),
    path('certificates/', include((certificates_urlpatterns, 'certificates'))),
    path('affiliates/', include((affiliates_urlpatterns, 'affiliates'))),
    path('admin/', include((admin_urlpatterns, 'admin'))),
]
