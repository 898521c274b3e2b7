from __future__ import annotations

from typing import Dict, List, Sequence

from app.chat.contracts import ChatMessage


COPILOT_SYSTEM = (
    "You are a friendly AI-powered DeFi copilot for Mantle Network. "
    "You are conversational and helpful, and an expert in Mantle Network, "
    "Agni Finance, Merchant Moe, FusionX, Lendle and DeFi in general. "
    "Be educational but not overwhelming, and enthusiastic about DeFi "
    "opportunities while being mindful of risks. "
    "You can answer questions about DeFi, Mantle Network and crypto, explain how "
    "to use Mantle protocols, and help users understand wallet connections, swaps "
    "and yield farming. "
    "Transactions such as swaps, transfers and staking are prepared separately "
    "with a safety preview; never claim to have executed one. "
    "Keep responses concise and helpful."
)


def build_conversation_messages(
    message: str,
    history: Sequence[ChatMessage],
    context: Dict[str, object] | None = None,
) -> List[Dict[str, str]]:
    system = COPILOT_SYSTEM
    if context and context.get("wallet_address"):
        system += (
            f" The user's wallet {context['wallet_address']} is connected"
            f" on chain {context.get('chain_id') or 'unknown'}."
        )
    messages: List[Dict[str, str]] = [{"role": "system", "content": system}]
    messages.extend({"role": m.role, "content": m.content} for m in history)
    messages.append({"role": "user", "content": message})
    return messages
