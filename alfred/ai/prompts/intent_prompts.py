"""
Intent Prompts - templates for classifying knowledge-base requests.

These prompts turn a request like:
  "criar tarefa: revisar relatório até amanhã"

into a JSON document like:
  {
    "intent": "create_task",
    "entities": {"title": "revisar relatório", "due_date": "amanhã"},
    "confidence": 0.95,
    "response": "Vou criar a tarefa para você."
  }

The classifier only labels and extracts. Normalization of dates, priorities
and titles happens afterwards in CommandExtractor, so the prompt keeps the
raw words the user said.
"""

# ---------------------------------------------------------------------------
# CLASSIFIER SYSTEM PROMPT
# ---------------------------------------------------------------------------

CLASSIFIER_SYSTEM_PROMPT = """Você é Alfred, um assistente de produtividade integrado ao Notion.
Analise a entrada do usuário e identifique:

1. INTENÇÃO (intent): exatamente uma das seguintes categorias:
{intents}

2. ENTIDADES (entities): extraia apenas as informações presentes no texto:
{entities}

3. CONFIANÇA (confidence): nível de confiança na análise, de 0 a 1.

4. RESPOSTA (response): resposta natural e amigável para o usuário, em português.

REGRAS:
- Use as palavras do usuário para datas e prioridades ("amanhã", "urgente"); não converta.
- Omita entidades que não aparecem no texto.
- Se a mensagem não for um pedido de ação, use "conversation".

Responda APENAS com um JSON válido no formato:
{{
  "intent": "categoria_da_intenção",
  "entities": {{"chave": "valor"}},
  "confidence": 0.95,
  "response": "Resposta amigável para o usuário"
}}"""


INTENT_DESCRIPTIONS = {
    "create_task": "Criar nova tarefa",
    "update_task": "Atualizar tarefa existente",
    "complete_task": "Marcar tarefa como concluída",
    "list_tasks": "Listar tarefas",
    "create_note": "Criar nova nota",
    "search_notes": "Buscar notas",
    "create_project": "Criar novo projeto",
    "dashboard": "Mostrar resumo/dashboard",
    "analytics": "Mostrar estatísticas de produtividade",
    "help": "Solicitar ajuda",
    "conversation": "Conversa geral",
}

ENTITY_DESCRIPTIONS = {
    "title": "Título da tarefa/nota/projeto",
    "description": "Descrição ou conteúdo",
    "priority": "Prioridade (alta, média, baixa)",
    "due_date": "Data de vencimento",
    "tags": "Tags ou categorias (lista)",
    "status": "Status atual (a fazer, em andamento, concluído)",
    "project_name": "Nome do projeto",
    "search_query": "Termo de busca",
    "task_id": "Identificador da tarefa, se informado",
    "new_title": "Novo título ao renomear uma tarefa",
    "limit": "Quantidade máxima de itens a listar",
    "period": "Período das estatísticas (dia, semana, mês)",
}


# ---------------------------------------------------------------------------
# CLASSIFIER USER PROMPT
# ---------------------------------------------------------------------------

CLASSIFIER_USER_PROMPT = """Contexto da conversa: {history}

Mensagem do usuário: {request}"""


def build_classifier_system_prompt() -> str:
    """Render the system prompt with the intent taxonomy and entity vocabulary."""
    intents = "\n".join(f"   - {name}: {text}" for name, text in INTENT_DESCRIPTIONS.items())
    entities = "\n".join(f"   - {name}: {text}" for name, text in ENTITY_DESCRIPTIONS.items())
    return CLASSIFIER_SYSTEM_PROMPT.format(intents=intents, entities=entities)


def build_classifier_prompt(request: str, history: str) -> str:
    return CLASSIFIER_USER_PROMPT.format(history=history, request=request)
