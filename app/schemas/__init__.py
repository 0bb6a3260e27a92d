from app.schemas.auth import (
    RegisterRequest, RegisterResponse, VerifyEmailRequest, LoginRequest,
    ForgotPasswordRequest, ResetPasswordRequest, RefreshTokenRequest,
    TokenResponse, MessageResponse
)
from app.schemas.user import (
    UserOut, UserSummary, UserUpdateRequest, ChangePasswordRequest,
    AvatarUploadResponse, UserAuthResponse, LoginResponse, DashboardResponse
)
from app.schemas.property import (
    PropertyCreateRequest, PropertyUpdateRequest, PropertyOut, PropertyDetailOut,
    PropertyListItem, PropertySummary, PropertyListResponse, Pagination, FavoriteCreateRequest, FavoriteOut
)
from app.schemas.project import (
    ProjectCreateRequest, ProjectUpdateRequest, ProjectOut, ProjectDetailOut, ProjectListResponse,
    AgentOut, AgentDetailOut, AgentListResponse, AgentProfileUpdateRequest,
    BuilderOut, BuilderDetailOut, BuilderListResponse, BuilderProfileUpdateRequest
)
from app.schemas.inquiry import (
    InquiryCreateRequest, InquiryStatusUpdate, InquiryOut, InquiryListResponse,
    ContactCreateRequest, ContactStatusUpdate, ContactMessageOut, ContactMessageListResponse
)
from app.schemas.notification import NotificationOut, NotificationListResponse
from app.schemas.membership import (
    PlanCreateRequest, PlanUpdateRequest, PlanOut, MembershipOut,
    MembershipRequestCreate, MembershipRequestReview, MembershipRequestOut,
    OrderCreateRequest, OrderCreateResponse, PaymentVerifyRequest, PaymentVerifyResponse,
    TransactionOut, TransactionListResponse, TransactionStatusUpdate
)
from app.schemas.newsletter import (
    NewsletterSubscribeRequest, SubscriberOut, SubscriberListResponse,
    NewsletterSendRequest, NewsletterSendResponse
)
from app.schemas.admin import (
    AdminStatsResponse, AdminUserListResponse, AdminUserUpdateRequest,
    AdminPropertyListResponse, AdminPropertyUpdateRequest, RejectPropertyRequest,
    AuditLogOut, AuditLogListResponse
)
