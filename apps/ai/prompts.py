# apps/ai/prompts.py

"""
Mensagens enviadas ao LLM

Cada função devolve a lista [system, user] pronta para o /chat/completions.
"""

import json


def _clean(text):
    # Remove a indentação do template, inclusive das linhas interpoladas
    return "\n".join(line.strip() for line in text.strip().splitlines())


def _messages(system, user):
    return [
        {"role": "system", "content": _clean(system)},
        {"role": "user", "content": _clean(user)},
    ]


def task_update_messages(title, description, current, roster):
    """Sugestões de campos para o formulário de tarefa, com a equipe real"""
    summary = [
        {
            'id': member.get('id'),
            'name': member.get('name'),
            'role': member.get('role'),
            'skills': member.get('skills') or [],
        }
        for member in roster
    ]
    fields = f"""
        - priority: {current['priority']}
        - category: {current['category'] or '(none)'}
        - deadline: {current['deadline'] or '(none)'}
        - assignee: {current['suggested_assignee'] or '(unassigned)'}"""

    system = f"""
        You are an AI assistant that suggests possible updates to a task's fields.
        The user already has:{fields}

        You have a list of possible assignees you can choose from.
        If you want to change the assignee, pick only from this list.
        (If you do not want to change assignee, you can keep the same name.)

        Return ONLY valid JSON, exactly:
        {{
          "priority": "low|medium|high|critical",
          "category": "string category or empty string",
          "deadline": "YYYY-MM-DD or null",
          "suggested_assignee": "string or null (must match one of the user names if you want to reassign)",
          "reasoning": "short explanation"
        }}
    """

    user = f"""
        Title: "{title or ''}"
        Description: "{description or '(none)'}"

        Current fields:{fields}

        Possible users for assignment:
        {json.dumps(summary, indent=2, ensure_ascii=False)}

        If you want to change the assignee, pick the name from that user list.
        Return ONLY the JSON object with "priority", "category", "deadline",
        "suggested_assignee", and "reasoning".
    """
    return _messages(system, user)


def custom_query_messages(query, task_id=None, task=None):
    """Pergunta livre do usuário, opcionalmente sobre uma tarefa"""
    system = """
        You are an AI assistant analyzing tasks and answering user queries about them.
        Respond ONLY with valid JSON in the format: { "response": "Your text answer here" }
    """

    task_details = ''
    if task is not None:
        task_details = f"""
        Task title: {task.title}
        Task description: {task.description or 'No description provided'}
        Task status: {task.status}
        Task priority: {task.priority}"""

    user = f"""
        The user asked: "{query}"
        Task ID (if any): {task_id or 'none'}{task_details}

        Please respond with a helpful answer. Return ONLY JSON with this structure:
        {{ "response": "Your text here" }}
    """
    return _messages(system, user)


def priority_messages(task):
    system = """
        You are an AI assistant analyzing kanban board tasks and providing priority recommendations.
        For the task I will provide, analyze if its current priority is appropriate or should be changed.
        Respond in JSON format only, with this structure:
        {
          "suggested_priority": "low|medium|high|critical",
          "reason": "Brief explanation of why this priority is appropriate"
        }
    """

    user = f"""
        Task: {task.title}
        Description: {task.description or 'No description provided'}
        Current Priority: {task.priority or 'medium'}
        Deadline: {task.deadline.isoformat() if task.deadline else 'Not specified'}
        Assignee: {task.assignee.display_name if task.assignee else 'Unassigned'}

        Based on this information, analyze if the current priority is appropriate or needs to be changed.
        Provide your suggested priority and reasoning, in valid JSON only.
    """
    return _messages(system, user)


def workflow_messages(task_summary):
    system = """
        You are an AI assistant analyzing a kanban board workflow. Based on the task data provided,
        identify workflow improvement opportunities.
        Respond in JSON format only, with exactly 4 suggestions in this structure:
        [
          {
            "title": "Short descriptive title of the improvement",
            "description": "Detailed explanation of the workflow improvement",
            "impact": "A number from 1-5"
          }
        ]
    """

    user = f"""
        Here is the current task data from the kanban board:
        {json.dumps(task_summary, indent=2, ensure_ascii=False)}

        Based on this data, identify 4 workflow improvement suggestions that would help the team work more
        efficiently. Consider patterns in task management, bottlenecks, priority distribution, and resource allocation.
        Focus on process improvements rather than specific task content.
    """
    return _messages(system, user)


def bottleneck_messages(analysis):
    system = """
        You are an AI assistant analyzing a kanban board for workflow bottlenecks.
        Based on the task data and status statistics provided, identify the top 3 bottlenecks.
        Respond in JSON format only, with this structure:
        [
          {
            "area": "Name of the bottleneck area",
            "severity": "high|medium|low",
            "description": "Detailed description",
            "affected_tasks": Number,
            "avg_delay": Number,
            "solution": "Proposed solution"
          }
        ]
    """

    user = f"""
        Here is the current task data and status statistics from the kanban board:
        {json.dumps(analysis, indent=2, ensure_ascii=False)}

        Analyze this data to identify the top 3 bottlenecks in the workflow.
        For each bottleneck, provide:
        - area
        - severity (high|medium|low)
        - description
        - affected_tasks (an estimate)
        - avg_delay
        - solution
    """
    return _messages(system, user)


def prediction_messages(project_data):
    system = """
        You are an AI assistant analyzing kanban board data to generate project predictions and insights.
        Based on the project statistics provided, generate predictions about project timeline, resource allocation,
        and identify potential risk factors.
        Respond in JSON format only, with this structure:
        {
          "completion_percentage": <integer>,
          "projected_end_date": "YYYY-MM-DD",
          "on_schedule": true|false,
          "resource_alerts": [
            {
              "title": "Brief title",
              "description": "Detailed explanation",
              "severity": "high|medium|low"
            }
          ],
          "risk_factors": [
            {
              "factor": "Name of risk",
              "level": "high|medium|low",
              "description": "Detailed explanation"
            }
          ]
        }
    """

    user = f"""
        Here are the current project statistics from the kanban board:
        {json.dumps(project_data, indent=2, ensure_ascii=False)}

        Based on this data, generate project predictions that include:
        1. The current completion percentage
        2. A projected end date (YYYY-MM-DD)
        3. Whether the project is on schedule
        4. 2-3 resource alerts
        5. 3 risk factors
    """
    return _messages(system, user)
