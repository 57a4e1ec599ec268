"""Sidebar, breadcrumbs, header and page guide for the client chrome.

All functions here are pure: they depend only on the role names, counts and
path handed in.
"""
from .permissions import ADMIN_ROLES, ROLE_ADMIN, ROLE_CANDIDATE, ROLE_MENTOR, ROLE_SUPER_ADMIN


MENTOR_SIDEBAR = [
    {"name": "Dashboard", "href": "/mentor/dashboard", "description": "Overview and quick stats"},
    {"name": "Browse Candidates", "href": "/mentors", "description": "Find potential mentees"},
    {
        "name": "Mentorship Requests",
        "href": "/mentor/requests",
        "description": "Review incoming requests",
        "badge": "pending_requests",
    },
    {
        "name": "My Candidates",
        "href": "/mentor/candidates",
        "description": "Manage accepted mentees",
        "badge": "accepted_candidates",
    },
    {"name": "Sessions", "href": "/sessions", "description": "Schedule and manage sessions"},
    {"name": "Analytics", "href": "/analytics", "description": "Track progress and insights"},
    {"name": "Reviews", "href": "/reviews", "description": "View and manage reviews"},
    {"name": "Profile", "href": "/profile/edit", "description": "Edit your profile"},
    {"name": "Settings", "href": "/settings", "description": "Account and preferences"},
]

CANDIDATE_SIDEBAR = [
    {"name": "Dashboard", "href": "/candidate/dashboard", "description": "Overview and progress"},
    {"name": "Find Mentors", "href": "/mentors", "description": "Discover mentors in your field"},
    {
        "name": "My Requests",
        "href": "/candidate/requests",
        "description": "View your mentorship requests",
        "badge": "total_requests",
    },
    {
        "name": "Learning Roadmaps",
        "href": "/candidate/roadmaps",
        "description": "Track your learning progress",
        "badge": "total_roadmaps",
    },
    {"name": "Sessions", "href": "/sessions", "description": "Manage your sessions"},
    {"name": "Chat", "href": "/chat", "description": "Message mentors"},
    {"name": "Reviews", "href": "/reviews", "description": "View and write reviews"},
    {"name": "Analytics", "href": "/analytics", "description": "Track your progress"},
    {"name": "Profile", "href": "/profile/edit", "description": "Edit your profile"},
    {"name": "Settings", "href": "/settings", "description": "Account and preferences"},
]

ADMIN_SIDEBAR = [
    {"name": "Dashboard", "href": "/admin/dashboard", "description": "Admin overview"},
    {"name": "Users", "href": "/admin/users", "description": "Manage all users"},
    {"name": "Mentorship Requests", "href": "/admin/requests", "description": "Review all requests"},
    {"name": "Analytics", "href": "/admin/analytics", "description": "System analytics"},
    {"name": "Settings", "href": "/admin/settings", "description": "System settings"},
]

SIDEBAR_TITLES = {
    ROLE_MENTOR: {"title": "Mentor Portal", "subtitle": "Manage your mentorship"},
    ROLE_CANDIDATE: {"title": "Candidate Portal", "subtitle": "Track your learning"},
    ROLE_ADMIN: {"title": "Admin Portal", "subtitle": "System management"},
}
DEFAULT_SIDEBAR_TITLE = {"title": "Portal", "subtitle": "Navigation"}

BREADCRUMB_LABELS = {
    "candidate": "Candidate",
    "mentor": "Mentor",
    "admin": "Admin",
    "dashboard": "Dashboard",
    "requests": "Requests",
    "sessions": "Sessions",
    "auth": "Authentication",
    "login": "Login",
    "register": "Register",
    "onboarding": "Onboarding",
    "pending-approval": "Pending Approval",
    "booking": "Booking",
    "chat": "Chat",
    "video-call": "Video Call",
    "session-feedback": "Session Feedback",
    "reviews": "Reviews",
    "analytics": "Analytics",
    "settings": "Settings",
    "profile": "Profile",
    "users": "User Management",
    "mentors": "Find Mentors",
}

NAVIGATION_GUIDE = [
    {
        "title": "Dashboard & Overview",
        "description": "Main dashboard and overview pages",
        "items": [
            {
                "name": "Candidate Dashboard",
                "href": "/candidate/dashboard",
                "description": "View your mentorship journey and progress",
                "role": ROLE_CANDIDATE,
            },
            {
                "name": "Mentor Dashboard",
                "href": "/mentor/dashboard",
                "description": "Manage your mentorship activities",
                "role": ROLE_MENTOR,
            },
            {
                "name": "Admin Dashboard",
                "href": "/admin/dashboard",
                "description": "Manage users and approve requests",
                "role": ROLE_SUPER_ADMIN,
            },
        ],
    },
    {
        "title": "Mentorship & Requests",
        "description": "Find mentors and manage requests",
        "items": [
            {"name": "Find Mentors", "href": "/mentors", "description": "Discover mentors in your field"},
            {
                "name": "My Requests",
                "href": "/candidate/requests",
                "description": "View your mentorship requests",
                "role": ROLE_CANDIDATE,
            },
            {
                "name": "Mentorship Requests",
                "href": "/mentor/requests",
                "description": "Review incoming requests",
                "role": ROLE_MENTOR,
            },
        ],
    },
    {
        "title": "Sessions & Learning",
        "description": "Manage sessions and track progress",
        "items": [
            {"name": "Sessions", "href": "/sessions", "description": "Manage your mentorship sessions"},
            {"name": "Session Feedback", "href": "/session-feedback", "description": "Provide feedback on sessions"},
            {"name": "Learning Progress", "href": "/learning-progress", "description": "Track your skill development"},
        ],
    },
    {
        "title": "Communication",
        "description": "Chat and video call features",
        "items": [
            {"name": "Chat", "href": "/chat", "description": "Message mentors and candidates"},
            {"name": "Video Calls", "href": "/video-call", "description": "Join video sessions"},
        ],
    },
    {
        "title": "Reviews & Feedback",
        "description": "Rate and review experiences",
        "items": [
            {"name": "Reviews", "href": "/reviews", "description": "View and write reviews"},
            {"name": "Analytics", "href": "/analytics", "description": "Track your progress and insights"},
        ],
    },
    {
        "title": "Account & Settings",
        "description": "Manage your account and preferences",
        "items": [
            {"name": "Profile", "href": "/profile", "description": "Update your profile information"},
            {"name": "Settings", "href": "/settings", "description": "Manage account settings"},
        ],
    },
]

# (prefix, public, required roles). First match wins, so longer prefixes go first.
ROUTE_TABLE = [
    ("/auth/", True, None),
    ("/onboarding/", True, None),
    ("/admin/", False, (ROLE_ADMIN, ROLE_SUPER_ADMIN)),
    ("/mentor/", False, (ROLE_MENTOR,)),
    ("/candidate/", False, (ROLE_CANDIDATE,)),
]
PUBLIC_EXACT_PATHS = {"/", "/admin"}

ROLE_LABELS = {
    ROLE_CANDIDATE: "Candidate",
    ROLE_MENTOR: "Mentor",
    ROLE_ADMIN: "Admin",
    ROLE_SUPER_ADMIN: "Super Admin",
}


def normalize_path(path):
    path = (path or "/").split("?", 1)[0].strip() or "/"
    if not path.startswith("/"):
        path = f"/{path}"
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def route_requirements(path):
    """Return ``(public, required_roles)`` for a client path."""
    path = normalize_path(path)
    if path in PUBLIC_EXACT_PATHS:
        return True, None
    for prefix, public, required_roles in ROUTE_TABLE:
        if f"{path}/".startswith(prefix):
            return public, required_roles
    return False, None


def sidebar_role(roles):
    if ROLE_MENTOR in roles:
        return ROLE_MENTOR
    if ROLE_CANDIDATE in roles:
        return ROLE_CANDIDATE
    if any(role in ADMIN_ROLES for role in roles):
        return ROLE_ADMIN
    return None


def sidebar_items(roles, counts=None, current_path="/"):
    counts = counts or {}
    current_path = normalize_path(current_path)
    template = {
        ROLE_MENTOR: MENTOR_SIDEBAR,
        ROLE_CANDIDATE: CANDIDATE_SIDEBAR,
        ROLE_ADMIN: ADMIN_SIDEBAR,
    }.get(sidebar_role(roles), [])
    items = []
    for entry in template:
        badge_key = entry.get("badge")
        badge = counts.get(badge_key) if badge_key else None
        items.append(
            {
                "name": entry["name"],
                "href": entry["href"],
                "description": entry["description"],
                "active": current_path == entry["href"],
                "badge": badge or None,
            }
        )
    return items


def sidebar_title(roles):
    return dict(SIDEBAR_TITLES.get(sidebar_role(roles), DEFAULT_SIDEBAR_TITLE))


def quick_stats(roles, counts=None):
    counts = counts or {}
    role = sidebar_role(roles)
    if role == ROLE_MENTOR:
        return [
            {"label": "Active Mentees", "value": counts.get("accepted_candidates", 0)},
            {"label": "Pending Requests", "value": counts.get("pending_requests", 0)},
        ]
    if role == ROLE_CANDIDATE:
        return [
            {"label": "Total Requests", "value": counts.get("total_requests", 0)},
            {"label": "Learning Roadmaps", "value": counts.get("total_roadmaps", 0)},
            {"label": "Pending Requests", "value": counts.get("pending_requests", 0)},
        ]
    if role == ROLE_ADMIN:
        return [
            {"label": "Total Users", "value": counts.get("total_users", 0)},
            {"label": "Active Requests", "value": counts.get("pending_requests", 0)},
        ]
    return []


def breadcrumb_label(segment):
    if segment in BREADCRUMB_LABELS:
        return BREADCRUMB_LABELS[segment]
    return segment[:1].upper() + segment[1:].replace("-", " ")


def build_breadcrumbs(path):
    segments = [segment for segment in (path or "").split("?", 1)[0].split("/") if segment]
    crumbs = [{"label": "Home", "href": "/"}]
    current = ""
    for index, segment in enumerate(segments):
        current += f"/{segment}"
        is_last = index == len(segments) - 1
        crumbs.append({"label": breadcrumb_label(segment), "href": None if is_last else current})
    if len(crumbs) <= 1:
        return []
    return crumbs


def navigation_guide(roles):
    sections = []
    for section in NAVIGATION_GUIDE:
        items = [
            {key: value for key, value in item.items() if key != "role"}
            for item in section["items"]
            if item.get("role") is None or item["role"] in roles
        ]
        if items:
            sections.append({"title": section["title"], "description": section["description"], "items": items})
    return sections


def _initials(name):
    parts = [part for part in (name or "").replace("@", " ").split() if part]
    return "".join(part[0] for part in parts[:2]).upper() or "U"


def header_context(auth_context):
    profile = auth_context.profile or {}
    user = auth_context.user
    display_name = profile.get("display_name") or (user.email.split("@")[0] if user and user.email else "")
    primary = auth_context.primary_role
    return {
        "display_name": display_name,
        "email": profile.get("email") or (user.email if user else ""),
        "initials": _initials(display_name),
        "role": primary,
        "role_label": ROLE_LABELS.get(primary, "Guest" if user is None else "Pending"),
    }
