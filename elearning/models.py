"""
E-Learning Application Models Registry

This module serves as the central models registry for the E-Learning application.
It imports and exposes all models from the logical submodules to ensure they are
properly registered with Django's ORM system.

The modular structure promotes separation of concerns while maintaining a unified
Django app namespace for the E-Learning functionality.

Architecture:
- users/: User profile and referral binding
- modules/: Course catalogue, module progress and milestones
- lessons/: Lessons and lesson progress
- quizzes/: Quizzes, questions and attempts
- certificates/: Course completion certificates
- payments/: Payment ledger (webhook events are stored by dj-stripe)
- live/: Live Q&A sessions, RSVPs and questions
- affiliates/: Affiliate program (clicks, conversions, payouts)
- administration/: Audit trail of staff actions and internal student notes

Author: DSP Development Team
Version: 1.0.0
"""

# Import all user-related models for registration with Django ORM
from .users.models import *

# Import all course and module-related models for registration with Django ORM
from .modules.models import *

# Import lesson models for registration with Django ORM
from .lessons.models import *

# Import all quiz-related models for registration with Django ORM
from .quizzes.models import *

# Import certificate models for registration with Django ORM
from .certificates.models import *

# Import the payment ledger for registration with Django ORM
from .payments.models import *

# Import live session models for registration with Django ORM
from .live.models import *

# Import affiliate program models for registration with Django ORM
from .affiliates.models import *

# Import administration models for registration with Django ORM
from .administration.models import *
