from app.config import get_config
from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.services.slot_service import SlotService
from app.services.template_service import TemplateService

config = get_config()

# Initialize services
auth_service = AuthService(config)
user_service = UserService(config)
slot_service = SlotService(config)
template_service = TemplateService(config)
