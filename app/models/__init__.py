from .user import User
from .application import Application
from .notification import Notification, OutboxMessage
from .setting import Setting
from .team import TeamCategory, TeamMember
from .event import Event, EventRegistration
from .visitor import Visitor
# base mixins are imported by the above as needed
