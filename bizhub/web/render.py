"""
HTML rendering for BizHub pages.

Every value coming from the database or the request is passed through
``esc`` before it is interpolated.
"""
from decimal import Decimal
from html import escape
from typing import Iterable, List, Optional
from urllib.parse import quote

from bizhub.errors import OwnershipError
from bizhub.services.models import (
    Business,
    Category,
    Conversation,
    Message,
    Product,
    Session,
)

from .notices import NOTICE_FADE_MS, NOTICE_VISIBLE_MS, Notice
from .theme import THEME_ICONS, theme_icon

DESCRIPTION_PREVIEW_CHARS = 100
DEFAULT_CATEGORY_ICON = "📁"

PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;charset=UTF-8,"
    "%3Csvg width=%27400%27 height=%27200%27 xmlns=%27http://www.w3.org/2000/svg%27%3E"
    "%3Crect width=%27100%25%27 height=%27100%25%27 fill=%27%23e0e7ff%27/%3E"
    "%3Ctext x=%2750%25%27 y=%2750%25%27 font-family=%27Arial,sans-serif%27 font-size=%2718%27 "
    "fill=%27%236366f1%27 text-anchor=%27middle%27 dominant-baseline=%27middle%27%3ENo%20Image%3C/text%3E"
    "%3C/svg%3E"
)


def esc(value) -> str:
    return escape("" if value is None else str(value), quote=True)


def first_image(images: List[str]) -> str:
    return images[0] if images else PLACEHOLDER_IMAGE


def description_preview(description: Optional[str]) -> str:
    if not description:
        return "No description available"
    return description[:DESCRIPTION_PREVIEW_CHARS] + "..."


def format_price(price: Optional[Decimal]) -> str:
    """₹ amount without a trailing .0 for whole numbers; empty for no price."""
    if not price:
        return ""
    if price == price.to_integral_value():
        price = price.quantize(Decimal(1))
    return f"₹{price:f}"


# ==================== CARDS ====================

def business_card(business: Business) -> str:
    return f"""
<div class="card">
  <div class="card-img-wrapper">
    <img src="{esc(first_image(business.images))}" alt="{esc(business.name)}" class="card-img">
  </div>
  <h4>{esc(business.name)}</h4>
  <p>{esc(description_preview(business.description))}</p>
  <div class="flex justify-between items-center mt-md">
    <span class="text-tertiary">📞 {esc(business.phone or "N/A")}</span>
    <a href="/business-detail?id={quote(business.id)}" class="btn btn-outline btn-sm">View Details</a>
  </div>
</div>"""


def category_card(category: Category) -> str:
    return f"""
<a class="card text-center" href="/browse?category={quote(category.id)}">
  <div class="category-icon">{esc(category.icon or DEFAULT_CATEGORY_ICON)}</div>
  <h4>{esc(category.name)}</h4>
  <p>{esc(category.description or "")}</p>
</a>"""


def product_card(product: Product, manage_business_id: Optional[str] = None) -> str:
    """Product card; owner actions are added when manage_business_id is given."""
    price = format_price(product.price)
    price_html = f'<p class="price">{esc(price)}</p>' if price else ""
    actions = ""
    if manage_business_id:
        base = f"/products?id={quote(manage_business_id)}"
        delete_action = f"/products/{quote(manage_business_id)}/{quote(product.id)}/delete"
        actions = f"""
  <div class="flex gap-sm mt-md">
    <a class="btn btn-outline btn-sm" href="{base}&amp;edit={quote(product.id)}">Edit</a>
    <form method="post" action="{delete_action}"
          onsubmit="return confirm('Are you sure you want to delete this product?')">
      <button type="submit" class="btn btn-danger btn-sm">Delete</button>
    </form>
  </div>"""
    return f"""
<div class="card">
  <img src="{esc(first_image(product.images))}" class="card-img" alt="{esc(product.name)}">
  <h4>{esc(product.name)}</h4>
  <p>{esc(product.description or "No description")}</p>
  {price_html}{actions}
</div>"""


def grid(cards: Iterable[str], grid_id: str, empty_message: str) -> str:
    body = "".join(cards)
    if not body:
        body = f'<p class="text-center grid-full">{esc(empty_message)}</p>'
    return f'<div id="{grid_id}" class="grid">{body}</div>'


def grid_error(grid_id: str, message: str) -> str:
    return f'<div id="{grid_id}" class="grid"><p class="grid-full text-error">{esc(message)}</p></div>'


# ==================== NAVBAR / LAYOUT ====================

def theme_switcher(theme: str, return_to: str) -> str:
    options = "".join(
        f'<button type="submit" name="theme" value="{name}" '
        f'class="theme-option{" active" if name == theme else ""}">{icon} {name.title()}</button>'
        for name, icon in THEME_ICONS.items()
    )
    return f"""
<form method="post" action="/theme" class="theme-switcher">
  <input type="hidden" name="return_to" value="{esc(return_to)}">
  <span id="themeIcon">{theme_icon(theme)}</span>
  <div id="themeDropdown" class="theme-dropdown">{options}</div>
</form>"""


def auth_links(session: Optional[Session], display_name: Optional[str]) -> str:
    if session is None:
        return '<div id="authLinks"><a href="/login" class="btn btn-primary btn-sm">Login</a></div>'
    return f"""
<div id="authLinks" class="flex items-center gap-md">
  <span class="text-sm hidden-mobile">Hey, {esc(display_name)}!</span>
  <a href="/dashboard" class="btn btn-secondary btn-sm">Dashboard</a>
  <a href="/chat" class="btn btn-outline btn-sm">Messages</a>
  <form method="post" action="/logout"><button type="submit" class="btn btn-outline btn-sm">Logout</button></form>
</div>"""


def navbar(session: Optional[Session], display_name: Optional[str], theme: str, return_to: str) -> str:
    return f"""
<nav class="navbar">
  <a href="/" class="brand">BizHub</a>
  <div id="navMenu" class="nav-menu">
    <a href="/browse">Browse</a>
    {theme_switcher(theme, return_to)}
    {auth_links(session, display_name)}
  </div>
</nav>"""


def toast(notice: Optional[Notice]) -> str:
    if notice is None:
        return ""
    return f"""
<div class="toast toast-{notice.type.value}" id="toast">{esc(notice.message)}</div>
<script>
setTimeout(function () {{
  var t = document.getElementById('toast');
  t.style.opacity = '0';
  setTimeout(function () {{ t.remove(); }}, {NOTICE_FADE_MS});
}}, {NOTICE_VISIBLE_MS});
</script>"""


def layout(title: str, body: str, nav: str, theme: str, notice: Optional[Notice] = None) -> str:
    return f"""<!DOCTYPE html>
<html lang="en" data-theme="{esc(theme)}">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{esc(title)} | BizHub</title>
  <link rel="stylesheet" href="/static/css/style.css">
</head>
<body>
{nav}
<main class="container">
{body}
</main>
{toast(notice)}
</body>
</html>"""


# ==================== PAGE BODIES ====================

def home_body(featured: str, categories: str) -> str:
    return f"""
<section><h2>Featured Businesses</h2>{featured}</section>
<section><h2>Categories</h2>{categories}</section>"""


def browse_body(category: Optional[Category], businesses: List[Business]) -> str:
    heading = f"{category.icon or DEFAULT_CATEGORY_ICON} {category.name}" if category else "All Businesses"
    cards = grid((business_card(b) for b in businesses), "businessGrid", "No businesses found in this category.")
    return f"<h2>{esc(heading)}</h2>{cards}"


def business_detail_body(
    business: Business,
    products: List[Product],
    session: Optional[Session],
    return_to: str,
) -> str:
    gallery = "".join(f'<img src="{esc(url)}" class="card-img" alt="{esc(business.name)}">' for url in business.images)
    chat = ""
    if business.owner_id and (session is None or session.user_id != business.owner_id):
        chat = f"""
<form method="post" action="/chat/start">
  <input type="hidden" name="target_user_id" value="{esc(business.owner_id)}">
  <input type="hidden" name="business_id" value="{esc(business.id)}">
  <input type="hidden" name="return_url" value="{esc(return_to)}">
  <button type="submit" class="btn btn-primary">💬 Chat with owner</button>
</form>"""
    product_grid = grid((product_card(p) for p in products), "productsGrid", "No products listed yet.")
    return f"""
<h1>{esc(business.name)}</h1>
<div class="gallery">{gallery}</div>
<p>{esc(business.description or "No description available")}</p>
<p>📞 {esc(business.phone or "N/A")}</p>
{chat}
<h3>Products</h3>
{product_grid}"""


def dashboard_body(businesses: List[Business]) -> str:
    rows = "".join(
        f"""
<div class="card">
  <h4>{esc(b.name)}</h4>
  <p>Status: {esc(b.status)}</p>
  <a class="btn btn-outline btn-sm" href="/products?id={quote(b.id)}">Manage Products</a>
</div>"""
        for b in businesses
    )
    if not rows:
        rows = '<p class="grid-full">You have not registered a business yet.</p>'
    return f'<h2>My Businesses</h2><div class="grid">{rows}</div>'


def access_denied_body(error: OwnershipError) -> str:
    return f"""
<div class="access-denied">
  <h1>Access Denied / Error</h1>
  <p><strong>Error:</strong> {esc(error.message)}</p>
  <p><strong>Business ID:</strong> {esc(error.business_id)}</p>
  <p><strong>User ID:</strong> {esc(error.user_id or "Not logged in")}</p>
  <a class="btn" href="/products?id={quote(error.business_id or "")}">Retry</a>
  <a class="btn" href="/dashboard">Back to Dashboard</a>
</div>"""


def product_form(business_id: str, product: Optional[Product] = None) -> str:
    title = "Edit Product" if product else "Add Product"
    action = f"/products/{quote(business_id)}/save"
    editing = f'<input type="hidden" name="product_id" value="{esc(product.id)}">' if product else ""
    price = "" if product is None or product.price is None else f"{product.price:f}"
    return f"""
<div id="productModal" class="modal">
  <h3 id="modalTitle">{title}</h3>
  <form id="productForm" method="post" action="{action}" enctype="multipart/form-data">
    {editing}
    <label>Name <input id="productName" name="name" required value="{esc(product.name if product else "")}"></label>
    <label>Description <textarea id="productDesc" name="description">{esc(product.description if product else "")}</textarea></label>
    <label>Price <input id="productPrice" name="price" type="number" step="0.01" min="0" value="{esc(price)}"></label>
    <label>Images (up to 3) <input id="productImages" name="images" type="file" accept="image/*" multiple></label>
    <button type="submit" class="btn btn-primary">Save Product</button>
    <a class="btn btn-outline" href="/products?id={quote(business_id)}">Cancel</a>
  </form>
</div>"""


def products_body(business: Business, products_html: str, form_html: str) -> str:
    return f"""
<h1>Products for <span id="businessName">{esc(business.name or "Business")}</span></h1>
{form_html}
{products_html}"""


def login_body(return_url: str, error: Optional[str] = None) -> str:
    error_html = f'<p class="text-error">{esc(error)}</p>' if error else ""
    return f"""
<h2>Login</h2>
{error_html}
<form method="post" action="/login" class="auth-form">
  <input type="hidden" name="returnUrl" value="{esc(return_url)}">
  <label>Email <input name="email" type="email" required></label>
  <label>Password <input name="password" type="password" required></label>
  <button type="submit" class="btn btn-primary">Login</button>
</form>"""


def conversation_list_body(conversations: List[Conversation], user_id: str) -> str:
    items = "".join(
        f"""
<li><a href="/chat?conversation_id={quote(c.id)}">
  Conversation with {esc(c.other_participant(user_id))}{" (business)" if c.business_id else ""}
</a></li>"""
        for c in conversations
    )
    if not items:
        return "<h2>Messages</h2><p>No conversations yet.</p>"
    return f'<h2>Messages</h2><ul class="conversation-list">{items}</ul>'


def conversation_body(conversation: Conversation, messages: List[Message], user_id: str) -> str:
    bubbles = "".join(
        f'<div class="message {"message-own" if m.sender_id == user_id else "message-other"}">'
        f"{esc(m.content)}</div>"
        for m in messages
    )
    if not bubbles:
        bubbles = '<p class="text-tertiary">No messages yet. Say hello!</p>'
    return f"""
<h2>Chat</h2>
<div id="messages" class="messages">{bubbles}</div>
<form method="post" action="/chat/{quote(conversation.id)}/messages" class="message-form">
  <input name="content" required maxlength="4000" placeholder="Type a message...">
  <button type="submit" class="btn btn-primary">Send</button>
</form>"""
