"""App — coração do sistema: casos de uso, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (settings, logging, wiring)
- domain/: modelos de pedido, pagamento e frete
- use_cases/: casos de uso (sem IO direto)
- services/: serviços de aplicação (email, reserva de envio, CEP)
- infra/: implementações concretas de IO
- protocols/: contratos/interfaces
- observability/: logs estruturados, correlation_id, métricas

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
