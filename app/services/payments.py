"""
Colaborador de pagos.

El core sólo guarda referencias opacas de cobro y registra los montos de
premios. La captura y la transferencia real de fondos pasan por este servicio.
"""

import logging
import os
import uuid
from decimal import Decimal
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class PaymentGateway:
    """Servicio para generar referencias de cobro y liberar premios"""

    def __init__(self):
        self.currency = os.getenv("PAYMENTS_CURRENCY", "usd")
        self.payouts_enabled = os.getenv("PAYOUTS_ENABLED", "false").lower() in {
            "1",
            "true",
            "yes",
        }

    def create_payment_reference(
        self, kind: str, amount: Decimal, metadata: Optional[Dict[str, str]] = None
    ) -> str:
        """
        Genera la referencia del cobro pendiente de captura.

        Args:
            kind: "event" o "challenge"
            amount: Monto a cobrar
            metadata: Datos extra para conciliar (ids de usuario, evento, etc.)

        Returns:
            Referencia opaca; la captura la confirma el proveedor por webhook
        """
        reference = f"pi_{kind}_{uuid.uuid4().hex}_placeholder"
        logger.info(
            f"Payment reference {reference} created for {amount} {self.currency} "
            f"({metadata or {}})"
        )
        return reference

    def release_payouts(self, challenge_id: int, payouts: Dict[int, Decimal]) -> bool:
        """
        Envía los premios ya liquidados. Se llama después del commit de la
        liquidación y nunca modifica lo registrado.

        Returns:
            True si el envío quedó encolado
        """
        if not self.payouts_enabled:
            logger.info(
                f"Payouts disabled, challenge {challenge_id} settled without transfer"
            )
            return False

        for user_id, amount in payouts.items():
            logger.info(
                f"Payout queued: challenge {challenge_id} -> user {user_id}: "
                f"{amount} {self.currency}"
            )
        return True


# Instancia global del servicio
payment_gateway = PaymentGateway()
