from datetime import datetime, timedelta

from fastapi import APIRouter, Depends

from campushub.api.schemas import BadgeAward
from campushub.core.logging import log_evt
from campushub.core.security import require_admin

router = APIRouter(prefix="/api", tags=["community"])

COMMITTEES = [
    {
        "id": "1",
        "name": "Tech Committee",
        "description": "Responsible for organizing tech events, workshops, and hackathons. "
        "We focus on promoting technology and innovation within the community.",
        "memberCount": 15,
        "category": "Technology",
    },
    {
        "id": "2",
        "name": "Cultural Committee",
        "description": "Organizes cultural events, festivals, and performances. "
        "We celebrate diversity and promote cultural awareness.",
        "memberCount": 22,
        "category": "Culture",
    },
    {
        "id": "3",
        "name": "Sports Committee",
        "description": "Manages sports events, tournaments, and fitness activities. "
        "We promote healthy living and team spirit.",
        "memberCount": 18,
        "category": "Sports",
    },
    {
        "id": "4",
        "name": "Social Welfare Committee",
        "description": "Organizes community service activities, charity events, and social awareness campaigns.",
        "memberCount": 12,
        "category": "Social",
    },
]

PROFILE = {
    "id": "1",
    "name": "John Doe",
    "email": "john.doe@example.com",
    "role": "Committee Member",
    "avatar": "https://i.pravatar.cc/150?img=1",
    "phone": "+1 234 567 8900",
    "bio": "Active member of the tech committee, passionate about web development and event organization.",
    "eventsAttended": 12,
    "committeesJoined": 2,
    "achievements": 5,
}


def _badge(id_, name, description, icon, requirement, category):
    return {
        "id": id_,
        "name": name,
        "description": description,
        "icon": icon,
        "requirement": requirement,
        "category": category,
    }


BADGES = [
    _badge("1", "First Event", "Attended your first event", "event",
           "Attend any event to earn this badge", "Participation"),
    _badge("2", "Committee Member", "Joined your first committee", "groups",
           "Join any committee to earn this badge", "Community"),
    _badge("3", "Active Participant", "Participated in 5 events", "star",
           "Attend 5 events to earn this badge", "Participation"),
    _badge("4", "Team Player", "Joined 3 committees", "people",
           "Join 3 committees to earn this badge", "Community"),
    _badge("5", "Social Butterfly", "Sent 10 messages", "chat",
           "Send 10 messages to earn this badge", "Communication"),
    _badge("6", "Profile Complete", "Completed your profile", "person",
           "Complete all profile fields to earn this badge", "Profile"),
    _badge("7", "Event Organizer", "Helped organize an event", "event_available",
           "Be assigned as event organizer by admin", "Leadership"),
    _badge("8", "Volunteer", "Volunteered for community service", "volunteer_activism",
           "Participate in volunteer activities", "Service"),
]


@router.get("/committees")
def committees():
    return COMMITTEES


@router.get("/profile")
def profile():
    return PROFILE


@router.get("/badges")
def badges():
    return BADGES


@router.post("/admin/award-badge")
def award_badge(payload: BadgeAward, _: None = Depends(require_admin)):
    log_evt("info", "badge_awarded", badge_id=payload.badgeId, user_id=payload.userId)
    return {
        "success": True,
        "message": "Badge awarded successfully",
        "badgeId": payload.badgeId,
        "userId": payload.userId,
        "reason": payload.reason,
    }


@router.get("/admin/user-badges/{user_id}")
def user_badges(user_id: str, _: None = Depends(require_admin)):
    return {"userId": user_id, "badges": ["1", "2"], "totalBadges": 2}


@router.get("/admin/dashboard-stats")
def dashboard_stats(_: None = Depends(require_admin)):
    now = datetime.utcnow()
    return {
        "totalEvents": 12,
        "newMembers": 8,
        "totalImpressions": 15420,
        "badgesAwarded": 25,
        "messagesSent": 156,
        "activeCommittees": 4,
        "recentActivity": [
            {
                "id": "1",
                "type": "event_created",
                "message": 'New event "Tech Workshop" created',
                "timestamp": now.isoformat(),
                "icon": "event",
            },
            {
                "id": "2",
                "type": "member_joined",
                "message": "New member John Doe joined",
                "timestamp": (now - timedelta(hours=4)).isoformat(),
                "icon": "person_add",
            },
            {
                "id": "3",
                "type": "badge_awarded",
                "message": 'Badge "First Event" awarded to Jane Smith',
                "timestamp": (now - timedelta(hours=6)).isoformat(),
                "icon": "emoji_events",
            },
        ],
    }


@router.get("/messages/admin-stats")
def message_stats(_: None = Depends(require_admin)):
    return {
        "totalMessages": 156,
        "avgResponseTime": 12,
        "activeConversations": 8,
        "unreadMessages": 3,
    }
