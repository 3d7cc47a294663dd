"""
Taco Cloud - Template Configuration
=====================================
Jinja2 templates setup with custom filters and global functions.
"""

import os

from fastapi.templating import Jinja2Templates

from common.flash import get_flashed_messages
from common.helpers import format_datetime, mask_card

# Resolved relative to the project root so tests and scripts work from any cwd
TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
templates = Jinja2Templates(directory=TEMPLATE_DIR)


# ==========================================
# Register Filters & Globals
# ==========================================

# Filters (usage in template: {{ order.placed_at | datetime }})
templates.env.filters["datetime"] = format_datetime
templates.env.filters["mask_card"] = mask_card

_TYPE_LABELS = {
    "wrap": "Designate your wrap",
    "protein": "Pick your protein",
    "cheese": "Choose your cheese",
    "veggies": "Determine your veggies",
    "sauce": "Select your sauce",
}
templates.env.filters["type_label"] = lambda v: _TYPE_LABELS.get(str(v), str(v).title())

# Flash messages: available in templates via get_flashed_messages(request)
templates.env.globals["get_flashed_messages"] = get_flashed_messages
