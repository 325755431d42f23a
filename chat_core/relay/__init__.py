from chat_core.relay.service import RelayService, augment_system_message

__all__ = ["RelayService", "augment_system_message"]
