# app/modules/employees/emails.py
from __future__ import annotations
from html import escape
from typing import Tuple

SUBJECT = "Confirmation de votre inscription"

_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 560px; margin: 0 auto;">
  <h2>Bienvenue {prenom} {nom}</h2>
  <p>Votre inscription a bien été enregistrée.</p>
  <table cellpadding="6">
    <tr><td><strong>Matricule</strong></td><td>{matricule}</td></tr>
    <tr><td><strong>Poste</strong></td><td>{poste}</td></tr>
  </table>
  <p>Conservez votre matricule: il vous sera demandé avec votre code PIN lors du pointage.</p>
  <p style="color:#888;font-size:12px;">Ne communiquez jamais votre code PIN.</p>
</div>
"""


def render_confirmation_email(*, nom: str, prenom: str, poste: str, matricule: str) -> Tuple[str, str]:
    """(sujet, html). Le PIN n'apparaît jamais dans l'email."""
    html = _TEMPLATE.format(
        nom=escape(nom),
        prenom=escape(prenom),
        poste=escape(poste),
        matricule=escape(matricule),
    )
    return SUBJECT, html
