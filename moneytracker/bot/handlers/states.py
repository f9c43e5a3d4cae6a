# --- Estados da Conversa ---
ASKING_CONFIRMATION = 0
ASKING_RESET_CONFIRMATION = 1
ASKING_DELETE_CONFIRMATION = 2
