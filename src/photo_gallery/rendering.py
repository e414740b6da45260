"""HTML rendering for the login, gallery and upload pages."""

from dataclasses import dataclass
from urllib.parse import urlencode

from jinja2 import DictLoader, Environment
from markupsafe import Markup

from photo_gallery.services.gallery import ALL_TAGS, GalleryController, PhotoCard
from photo_gallery.services.upload import ProgressStep


@dataclass(frozen=True)
class Notice:
    """Inline status message shown on a page."""

    text: str
    level: str = "success"
    hide_after_seconds: float | None = None


@dataclass(frozen=True)
class Refresh:
    """Delayed client-side navigation."""

    url: str
    delay_seconds: float


_BASE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    {% if refresh %}<meta http-equiv="refresh" content="{{ refresh.delay_seconds }};url={{ refresh.url }}" />{% endif %}
    <title>{% block title %}Photo Gallery{% endblock %}</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; background: #fafafa; }
      header { display: flex; justify-content: space-between; align-items: center; padding: 1rem 2rem; background: #fff; border-bottom: 1px solid #eee; }
      main { padding: 2rem; max-width: 1100px; margin: 0 auto; }
      .message { display: none; padding: 0.8rem 1rem; border-radius: 6px; margin-bottom: 1rem; }
      .message.show { display: block; }
      .message.success { background: #e6f6ea; color: #1d6b34; }
      .message.error { background: #fdecea; color: #a1261b; }
      .auth-tabs a, .tag-btn { display: inline-block; padding: 0.4rem 0.9rem; margin: 0 0.4rem 0.4rem 0; border-radius: 999px; border: 1px solid #ccc; color: inherit; text-decoration: none; }
      .auth-tabs a.active, .tag-btn.active { background: #222; color: #fff; }
      .auth-form { display: none; }
      .auth-form.active { display: block; }
      label { display: block; margin-top: 0.8rem; }
      input, textarea { padding: 0.4rem 0.6rem; width: 320px; }
      .photo-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(240px, 1fr)); gap: 1rem; }
      .photo-card { background: #fff; border-radius: 8px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,.08); }
      .photo-card a { color: inherit; text-decoration: none; }
      .photo-card-image { width: 100%; aspect-ratio: 4 / 3; object-fit: cover; background: #eee; }
      .photo-card-content { padding: 0.8rem; }
      .tag { display: inline-block; font-size: 0.8rem; padding: 0.1rem 0.5rem; margin-right: 0.3rem; background: #eef; border-radius: 4px; }
      .modal { position: fixed; inset: 0; background: rgba(0,0,0,.7); display: flex; align-items: center; justify-content: center; }
      .modal-backdrop { position: absolute; inset: 0; }
      .modal-content { position: relative; background: #fff; padding: 1.5rem; border-radius: 8px; max-width: 800px; }
      .modal-content img { max-width: 100%; }
      .close { position: absolute; top: 0.5rem; right: 1rem; font-size: 1.5rem; color: inherit; text-decoration: none; }
      .progress-bar { height: 8px; background: #eee; border-radius: 4px; width: 320px; }
      .progress-fill { height: 100%; background: #222; border-radius: 4px; }
    </style>
  </head>
  <body>
    {% block body %}{% endblock %}
    <script>
      document.querySelectorAll('.message[data-hide-after]').forEach(function (el) {
        var delay = parseInt(el.dataset.hideAfter, 10);
        if (delay > 0) {
          setTimeout(function () { el.classList.remove('show'); }, delay);
        }
      });
    </script>
  </body>
</html>
"""

_NOTICE = """{% if notice %}<div class="message {{ notice.level }} show"{% if notice.hide_after_seconds %} data-hide-after="{{ (notice.hide_after_seconds * 1000) | int }}"{% endif %}>{{ notice.text }}</div>{% endif %}"""

_LOGIN = """{% extends "base.html" %}
{% block title %}Sign in - Photo Gallery{% endblock %}
{% block body %}
<main>
  <h1>Photo Gallery</h1>
  <nav class="auth-tabs">
    <a class="auth-tab{% if tab == 'login' %} active{% endif %}" data-tab="login" href="/login?tab=login">Sign in</a>
    <a class="auth-tab{% if tab == 'register' %} active{% endif %}" data-tab="register" href="/login?tab=register">Create account</a>
  </nav>
  {% include "notice.html" %}
  <form id="loginForm" class="auth-form{% if tab == 'login' %} active{% endif %}" method="post" action="/login">
    <label>Email <input id="loginEmail" name="email" type="email" value="{{ email if tab == 'login' else '' }}" /></label>
    <label>Password <input id="loginPassword" name="password" type="password" /></label>
    <p><button id="loginBtn" type="submit">Sign in</button></p>
  </form>
  <form id="registerForm" class="auth-form{% if tab == 'register' %} active{% endif %}" method="post" action="/register">
    <label>Email <input id="registerEmail" name="email" type="email" value="{{ email if tab == 'register' else '' }}" /></label>
    <label>Password <input id="registerPassword" name="password" type="password" /></label>
    <label>Confirm password <input id="registerPasswordConfirm" name="password_confirm" type="password" /></label>
    <p><button id="registerBtn" type="submit">Create account</button></p>
  </form>
</main>
{% endblock %}
"""

_REDIRECT = """{% extends "base.html" %}
{% block body %}
<main>
  {% include "notice.html" %}
  <p><a href="{{ refresh.url }}">Continue</a></p>
</main>
{% endblock %}
"""

_TAGS = """{% if tags %}<div class="tags">{% for tag in tags %}<span class="tag">{{ tag }}</span>{% endfor %}</div>{% endif %}"""

_CARD = """<article class="photo-card">
  {% if card.photo.id %}<a href="/?{{ {'tag': current_filter, 'photo': card.photo.id} | urlencode }}">{% endif %}
  {% if card.image_src %}
  <img class="photo-card-image" src="{{ card.image_src }}" alt="{{ card.photo.title }}" />
  {% else %}
  <img class="photo-card-image" data-src="{{ card.photo.image_url }}" alt="{{ card.photo.title }}" loading="lazy" />
  {% endif %}
  <div class="photo-card-content">
    <h3 class="photo-card-title">{{ card.photo.title }}</h3>
    {% if card.photo.description %}<p class="photo-card-description">{{ card.photo.description }}</p>{% endif %}
    {% with tags = card.photo.tags %}{% include "tags.html" %}{% endwith %}
    <p class="photo-card-date">{{ card.date_label }}</p>
  </div>
  {% if card.photo.id %}</a>{% endif %}
</article>
"""

_OVERLAY = """{% if overlay.is_open %}
<div id="photoModal" class="modal active">
  <a class="modal-backdrop" href="{{ close_url }}" aria-label="Close"></a>
  <div class="modal-content">
    <a class="close" href="{{ close_url }}" aria-label="Close">&times;</a>
    <img id="modalImage" src="{{ overlay.photo.image_url }}" alt="{{ overlay.photo.title }}" />
    <h2 id="modalTitle">{{ overlay.photo.title }}</h2>
    <p id="modalDescription">{{ overlay.photo.description or 'No description' }}</p>
    <div id="modalTags">{% with tags = overlay.photo.tags %}{% include "tags.html" %}{% endwith %}</div>
    <p id="modalDate">{% if overlay.date_label %}Uploaded on {{ overlay.date_label }}{% endif %}</p>
  </div>
</div>
{% endif %}
"""

_GALLERY = """{% extends "base.html" %}
{% block body %}
<header>
  <h1>Photo Gallery</h1>
  <nav>
    <a href="/upload">Upload photo</a>
    {% if authenticated %}
    <form method="post" action="/logout" style="display:inline"><button type="submit">Sign out</button></form>
    {% else %}
    <a href="/login">Sign in</a>
    {% endif %}
  </nav>
</header>
<main>
  {% if status == 'error' %}
  <div id="errorState"><p>{{ error_message }}</p><p><a href="/">Try again</a></p></div>
  {% else %}
  <div id="tagFilters">
    <a class="tag-btn{% if current_filter == all_tags %} active{% endif %}" data-tag="{{ all_tags }}" href="/?{{ {'tag': all_tags} | urlencode }}">All</a>
    {% for tag in tags %}
    <a class="tag-btn{% if current_filter == tag %} active{% endif %}" data-tag="{{ tag }}" href="/?{{ {'tag': tag} | urlencode }}">{{ tag }}</a>
    {% endfor %}
  </div>
  {% if status == 'empty' %}
  <div id="emptyState"><p>No photos to show yet.</p></div>
  {% else %}
  <section id="photoGrid" class="photo-grid">
    {% for card_html in card_html_list %}{{ card_html }}{% endfor %}
  </section>
  {% endif %}
  {{ overlay_html }}
  {% endif %}
</main>
<script>
  (function () {
    var images = document.querySelectorAll('img[data-src]');
    if ('IntersectionObserver' in window) {
      var observer = new IntersectionObserver(function (entries, obs) {
        entries.forEach(function (entry) {
          if (entry.isIntersecting) {
            var img = entry.target;
            img.src = img.dataset.src;
            img.removeAttribute('data-src');
            obs.unobserve(img);
          }
        });
      });
      images.forEach(function (img) { observer.observe(img); });
    } else {
      images.forEach(function (img) { img.src = img.dataset.src; });
    }
    var modal = document.getElementById('photoModal');
    document.addEventListener('keydown', function (event) {
      if (event.key === 'Escape' && modal) {
        window.location.href = modal.querySelector('.close').getAttribute('href');
      }
    });
  })();
</script>
{% endblock %}
"""

_UPLOAD = """{% extends "base.html" %}
{% block title %}Upload - Photo Gallery{% endblock %}
{% block body %}
<header>
  <h1>Upload a photo</h1>
  <nav><a href="/">Back to gallery</a></nav>
</header>
<main>
  {% include "notice.html" %}
  {% if progress %}
  <div id="uploadProgress">
    <div class="progress-bar"><div id="progressFill" class="progress-fill" style="width: {{ progress.percent }}%"></div></div>
    <p id="progressText">{{ progress.label }}</p>
  </div>
  {% endif %}
  <form id="uploadForm" method="post" action="/upload" enctype="multipart/form-data">
    <label>Title <input id="title" name="title" type="text" value="{{ form.title if form else '' }}" required /></label>
    <label>Description <textarea id="description" name="description">{{ form.description if form else '' }}</textarea></label>
    <label>Tags (comma separated) <input id="tags" name="tags" type="text" value="{{ form.tags if form else '' }}" /></label>
    <label>Image <input id="image" name="image" type="file" accept="image/*" /></label>
    <div id="imagePreview">{% if preview_url %}<img src="{{ preview_url }}" alt="Preview" style="max-width: 320px" />{% else %}<p>Choose an image</p>{% endif %}</div>
    <p><button id="submitBtn" type="submit"{% if submitting %} disabled{% endif %}>Upload</button></p>
  </form>
</main>
{% endblock %}
"""

_environment = Environment(
    loader=DictLoader(
        {
            "base.html": _BASE,
            "notice.html": _NOTICE,
            "login.html": _LOGIN,
            "redirect.html": _REDIRECT,
            "tags.html": _TAGS,
            "card.html": _CARD,
            "overlay.html": _OVERLAY,
            "gallery.html": _GALLERY,
            "upload.html": _UPLOAD,
        }
    ),
    autoescape=True,
)


def render_login_page(
    tab: str = "login", notice: Notice | None = None, email: str = ""
) -> str:
    """Render the sign-in page with either form active."""
    if tab not in {"login", "register"}:
        tab = "login"
    return _environment.get_template("login.html").render(
        tab=tab, notice=notice, email=email, refresh=None
    )


def render_redirect_page(notice: Notice, refresh: Refresh) -> str:
    """Render a message that navigates away after a short delay."""
    return _environment.get_template("redirect.html").render(
        notice=notice, refresh=refresh
    )


def render_photo_card(card: PhotoCard, current_filter: str = ALL_TAGS) -> str:
    return _environment.get_template("card.html").render(
        card=card, current_filter=current_filter
    )


def render_overlay(controller: GalleryController) -> str:
    return _environment.get_template("overlay.html").render(
        overlay=controller.overlay, close_url=_close_url(controller)
    )


def render_gallery_page(controller: GalleryController, authenticated: bool) -> str:
    """Render the gallery in its current state."""
    return _environment.get_template("gallery.html").render(
        status=controller.status.value,
        error_message=controller.error_message,
        tags=controller.tags,
        all_tags=ALL_TAGS,
        current_filter=controller.current_filter,
        card_html_list=[
            Markup(render_photo_card(card, controller.current_filter))
            for card in controller.cards
        ],
        overlay_html=Markup(render_overlay(controller)),
        authenticated=authenticated,
        refresh=None,
    )


def render_upload_page(  # noqa: PLR0913
    notice: Notice | None = None,
    progress: ProgressStep | None = None,
    preview_url: str | None = None,
    form: object | None = None,
    submitting: bool = False,
    refresh: Refresh | None = None,
) -> str:
    """Render the upload form with its status blocks."""
    return _environment.get_template("upload.html").render(
        notice=notice,
        progress=progress,
        preview_url=preview_url,
        form=form,
        submitting=submitting,
        refresh=refresh,
    )


def _close_url(controller: GalleryController) -> str:
    return "/?" + urlencode({"tag": controller.current_filter})
