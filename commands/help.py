"""Help command implementation."""

import discord


async def help_command(interaction: discord.Interaction) -> None:
    """Show all available bot commands.

    Args:
        interaction: Discord interaction object.
    """
    help_msg = (
        "📋 **Comandos Disponíveis**\n\n"
        "**Jogos de Hoje:**\n"
        "`/jogos` - Mostrar os jogos de hoje e resultados\n"
        "`/actualizar` - Actualizar os jogos agora\n\n"
        "O placar no canal é actualizado automaticamente: a cada minuto "
        "com jogos a decorrer, a cada 5 minutos nos restantes casos.\n\n"
        "**Outros:**\n"
        "`/help` - Mostrar esta mensagem de ajuda"
    )

    await interaction.followup.send(help_msg, ephemeral=True)
