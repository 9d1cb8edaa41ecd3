"""App: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos (fluxo, contato, mensagem, quota, log de webhook)
- use_cases/: casos de uso (processamento do webhook)
- services/: executor de fluxos, envio, quota, log de webhook
- infra/: implementações concretas de IO (HTTP, stores)
- protocols/: contratos/interfaces
- observability/: correlation id e métricas em log
- constants/: constantes da aplicação

Padrão: app executa; api adapta; config configura; utils apoia.
"""
