"""Templates HTML dos emails transacionais.

Todo valor vindo do pedido passa por html.escape antes de entrar no HTML.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from html import escape
from typing import TYPE_CHECKING

from app.domain.notifications import NotificationType

if TYPE_CHECKING:
    from app.domain.order import Order

_WRAPPER = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; color: #222;">
  <div style="background: #111; color: #fff; padding: 16px 24px;">
    <h2 style="margin: 0;">{store_name}</h2>
  </div>
  <div style="padding: 24px;">
{body}
  </div>
  <p style="font-size: 11px; color: #999; padding: 0 24px;">
    Este é um email automático. Em caso de dúvidas, responda a esta mensagem.
  </p>
</div>
"""


@dataclass(frozen=True, slots=True)
class RenderedEmail:
    subject: str
    html: str


def brl(value: Decimal) -> str:
    """Formata valor como 'R$ 1.234,56'."""
    formatted = f"{value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {formatted}"


def _wrap(store_name: str, body: str) -> str:
    return _WRAPPER.format(store_name=escape(store_name), body=body)


def render_confirmation(order: Order, store_name: str) -> RenderedEmail:
    items = "\n".join(
        f"      <li>{item.quantity}x {escape(item.title)} - {brl(item.unit_price)} cada</li>"
        for item in order.items
    )
    body = f"""\
    <h1>Pedido Confirmado! (Nº {order.id})</h1>
    <p>Olá, {escape(order.customer_name)}. Seu pagamento foi aprovado!</p>
    <p><strong>ID do Pagamento (Mercado Pago):</strong> {escape(order.gateway_payment_id or "-")}</p>
    <hr>
    <h2>Endereço de Entrega</h2>
    <p>{escape(order.address.one_line())}</p>
    <hr>
    <h2>Detalhes do Pedido</h2>
    <ul>
{items}
    </ul>
    <hr>
    <h2>Valores</h2>
    <p><strong>Frete ({escape(order.shipping.name)}):</strong> {brl(order.shipping.price)}</p>
    <h3><strong>Total:</strong> {brl(order.total)}</h3>"""
    return RenderedEmail(
        subject=f"Confirmação do Pedido #{order.id}",
        html=_wrap(store_name, body),
    )


def render_tracking(order: Order, store_name: str) -> RenderedEmail:
    body = f"""\
    <h1>Seu pedido foi postado!</h1>
    <p>Olá, {escape(order.customer_name)}.</p>
    <p>Seu pedido <strong>#{order.id}</strong> já foi enviado.</p>
    <p><strong>Código de rastreio:</strong> {escape(order.tracking_code or "")}</p>
    <p>Acompanhe pelo site dos Correios ou do Melhor Envio.</p>"""
    return RenderedEmail(
        subject=f"Código de Rastreio - Pedido #{order.id}",
        html=_wrap(store_name, body),
    )


def render_expiry(order: Order, store_name: str) -> RenderedEmail:
    body = f"""\
    <h1>Pagamento não confirmado para o Pedido #{order.id}</h1>
    <p>Olá, {escape(order.customer_name)}.</p>
    <p>O pagamento referente ao seu pedido <strong>#{order.id}</strong> não foi confirmado dentro do prazo.</p>
    <p>O link de pagamento expirou para evitar pagamentos duplicados. Se ainda deseja adquirir os produtos, faça um novo pedido em nosso site.</p>
    <p>Se você já pagou, entre em contato conosco com o comprovante de pagamento.</p>
    <hr>
    <p>Atenciosamente,<br>Equipe {escape(store_name)}</p>"""
    return RenderedEmail(
        subject=f"Aviso: Pagamento Pendente para o Pedido #{order.id}",
        html=_wrap(store_name, body),
    )


_RENDERERS = {
    NotificationType.CONFIRMATION: render_confirmation,
    NotificationType.TRACKING: render_tracking,
    NotificationType.EXPIRY: render_expiry,
}


def render(kind: NotificationType, order: Order, store_name: str) -> RenderedEmail:
    return _RENDERERS[kind](order, store_name)
